#!/usr/bin/env python3
# -*- coding:utf-8 -*-
# Copyright (c) Megvii, Inc. and its affiliates.

import argparse
from loguru import logger

import torch
from torch import nn

from cspdarknet.models import MODEL_SCALES, SiLU, create_cspdarknet
from cspdarknet.utils import fuse_model, get_model_info, replace_module


def make_parser():
    parser = argparse.ArgumentParser("CSPDarknet summary parser")
    parser.add_argument(
        "-n", "--name", type=str, default="s", help="model scale, one of {}".format(list(MODEL_SCALES))
    )
    parser.add_argument("-c", "--ckpt", default=None, type=str, help="checkpoint file")
    parser.add_argument(
        "--tsize", default=640, type=int, help="test img size"
    )
    parser.add_argument(
        "--act", default="silu", type=str, help="activation type of the convs"
    )
    parser.add_argument(
        "--depthwise",
        dest="depthwise",
        default=None,
        action="store_true",
        help="use depthwise convs regardless of the scale default.",
    )
    parser.add_argument(
        "--out-features",
        nargs="+",
        default=["dark3", "dark4", "dark5"],
        help="stages to report",
    )
    parser.add_argument(
        "--fuse",
        dest="fuse",
        default=False,
        action="store_true",
        help="Fuse conv and bn for testing.",
    )
    parser.add_argument(
        "--export-friendly",
        dest="export_friendly",
        default=False,
        action="store_true",
        help="replace nn.SiLU with the export-friendly SiLU.",
    )
    parser.add_argument(
        "--device", default="cpu", type=str, help="device to run the model, cpu or cuda"
    )
    return parser


@logger.catch
def main(args):
    model = create_cspdarknet(
        args.name,
        out_features=tuple(args.out_features),
        act=args.act,
        depthwise=args.depthwise,
        ckpt=args.ckpt,
        device=args.device,
    )
    model.eval()

    if args.export_friendly:
        model = replace_module(model, nn.SiLU, SiLU)
    if args.fuse:
        model = fuse_model(model)

    logger.info("Model Summary: {}".format(get_model_info(model, (args.tsize, args.tsize))))
    for name, channels in model.out_channels.items():
        logger.info("{}: {} channels".format(name, channels))

    with torch.no_grad():
        dummy = torch.zeros(1, 3, args.tsize, args.tsize, device=args.device)
        outputs = model(dummy)
    for name, feat in outputs.items():
        logger.info("{}: stride {}".format(name, args.tsize // feat.shape[-1]))


if __name__ == "__main__":
    args = make_parser().parse_args()
    main(args)
