#!/usr/bin/env python
# -*- encoding: utf-8 -*-
# Copyright (c) 2014-2021 Megvii Inc. All rights reserved.

from .checkpoint import load_ckpt, load_pretrained
from .model_utils import (
    fuse_conv_and_bn,
    fuse_model,
    get_model_info,
    initialize_batchnorm,
    replace_module,
)
