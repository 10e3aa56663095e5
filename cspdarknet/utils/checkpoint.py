#!/usr/bin/env python
# -*- encoding: utf-8 -*-
# Copyright (c) 2014-2021 Megvii Inc. All rights reserved.

import os

import torch
from loguru import logger

__all__ = ["load_ckpt", "load_pretrained"]

# a full YOLOX detector nests the darknet under YOLOX.backbone (PAFPN).backbone
_BACKBONE_PREFIXES = ("backbone.backbone.", "backbone.")


def load_ckpt(model, ckpt):
    model_state_dict = model.state_dict()
    load_dict = {}
    for key_model, v in model_state_dict.items():
        if key_model not in ckpt:
            logger.warning(
                "{} is not in the ckpt. Please double check and see if this is desired.".format(
                    key_model
                )
            )
            continue
        v_ckpt = ckpt[key_model]
        if v.shape != v_ckpt.shape:
            logger.warning(
                "Shape of {} in checkpoint is {}, while shape of {} in model is {}.".format(
                    key_model, v_ckpt.shape, key_model, v.shape
                )
            )
            continue
        load_dict[key_model] = v_ckpt

    model.load_state_dict(load_dict, strict=False)
    return model


def _strip_backbone_prefix(state_dict):
    for prefix in _BACKBONE_PREFIXES:
        if any(k.startswith(prefix) for k in state_dict):
            return {
                k[len(prefix):]: v for k, v in state_dict.items() if k.startswith(prefix)
            }
    return state_dict


def load_pretrained(model, ckpt_file, map_location="cpu"):
    """
    Load backbone weights from a file into ``model``.

    ``ckpt_file`` may hold a bare state dict or a YOLOX training checkpoint
    (``{"model": state_dict, ...}``) of a full detector, a PAFPN or the
    darknet alone.
    """
    if not os.path.isfile(ckpt_file):
        raise FileNotFoundError("checkpoint file {} not found".format(ckpt_file))

    logger.info("loading checkpoint from {}".format(ckpt_file))
    ckpt = torch.load(ckpt_file, map_location=map_location)
    if isinstance(ckpt, dict) and "model" in ckpt:
        ckpt = ckpt["model"]
    ckpt = _strip_backbone_prefix(ckpt)
    model = load_ckpt(model, ckpt)
    logger.info("loaded checkpoint {} done.".format(ckpt_file))
    return model
