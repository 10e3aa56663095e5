#!/usr/bin/env python
# -*- encoding: utf-8 -*-
# Copyright (c) 2014-2021 Megvii Inc. All rights reserved.

from .build import *
from .darknet import CSPDarknet, expand
from .network_blocks import (
    BaseConv,
    Bottleneck,
    CSPLayer,
    DWConv,
    Focus,
    SiLU,
    SPPBottleneck,
    get_activation,
)
