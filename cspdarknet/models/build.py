#!/usr/bin/env python
# -*- encoding: utf-8 -*-
# Copyright (c) 2014-2021 Megvii Inc. All rights reserved.

import torch
from loguru import logger

from cspdarknet.utils import initialize_batchnorm, load_pretrained

from .darknet import CSPDarknet

__all__ = [
    "MODEL_SCALES",
    "create_cspdarknet",
    "cspdarknet_nano",
    "cspdarknet_tiny",
    "cspdarknet_s",
    "cspdarknet_m",
    "cspdarknet_l",
    "cspdarknet_x",
]

# name: (depth, width, depthwise)
MODEL_SCALES = {
    "nano": (0.33, 0.25, True),
    "tiny": (0.33, 0.375, False),
    "s": (0.33, 0.50, False),
    "m": (0.67, 0.75, False),
    "l": (1.0, 1.0, False),
    "x": (1.33, 1.25, False),
}


def _canonical_name(name):
    key = name.lower()
    for prefix in ("yolox_", "yolox-"):
        if key.startswith(prefix):
            key = key[len(prefix):]
    if key not in MODEL_SCALES:
        raise ValueError(
            "unknown model name {}, choose one of {}".format(name, list(MODEL_SCALES))
        )
    return key


def create_cspdarknet(
    name="s",
    out_features=("dark3", "dark4", "dark5"),
    act="silu",
    depthwise=None,
    ckpt=None,
    device="cpu",
):
    """creates a CSPDarknet backbone at one of the YOLOX scales.

    Args:
        name (str): scale name, e.g. "s" or "yolox_s".
        out_features (tuple): stages returned by forward.
        act (str): activation type of the convs. Default value: "silu".
        depthwise (bool): use depthwise convs, None keeps the scale default.
        ckpt (str): optional checkpoint file to load weights from.
        device (str): device to move the model to. Default value: "cpu".

    Returns:
        CSPDarknet
    """
    key = _canonical_name(name)
    depth, width, scale_depthwise = MODEL_SCALES[key]
    if depthwise is None:
        depthwise = scale_depthwise

    model = CSPDarknet(
        depth, width, out_features=out_features, depthwise=depthwise, act=act
    )
    initialize_batchnorm(model)
    logger.info(
        "CSPDarknet-{}: depth={}, width={}, depthwise={}, act={}, out_features={}".format(
            key, depth, width, depthwise, act, model.out_features
        )
    )

    if ckpt is not None:
        model = load_pretrained(model, ckpt)

    return model.to(torch.device(device))


def cspdarknet_nano(**kwargs):
    return create_cspdarknet("nano", **kwargs)


def cspdarknet_tiny(**kwargs):
    return create_cspdarknet("tiny", **kwargs)


def cspdarknet_s(**kwargs):
    return create_cspdarknet("s", **kwargs)


def cspdarknet_m(**kwargs):
    return create_cspdarknet("m", **kwargs)


def cspdarknet_l(**kwargs):
    return create_cspdarknet("l", **kwargs)


def cspdarknet_x(**kwargs):
    return create_cspdarknet("x", **kwargs)
