#!/usr/bin/env python
# -*- encoding: utf-8 -*-
# Copyright (c) 2014-2021 Megvii Inc. All rights reserved.

from .models import CSPDarknet, create_cspdarknet

__version__ = "0.1.0"
