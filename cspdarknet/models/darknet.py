#!/usr/bin/env python
# -*- encoding: utf-8 -*-
# Copyright (c) 2014-2021 Megvii Inc. All rights reserved.

# CSPDarknet-53 backbone of YOLOX

from collections import OrderedDict

from torch import nn

from .network_blocks import BaseConv, CSPLayer, DWConv, Focus, SPPBottleneck

VALID_DEPTHS = (0.33, 0.67, 1.0, 1.33)
VALID_WIDTHS = (0.25, 0.375, 0.5, 0.75, 1.0, 1.25)
STAGE_NAMES = ("stem", "dark2", "dark3", "dark4", "dark5")


def expand(channels, factor):
    """Scale a channel count by the width multiplier, rounding down."""
    return int(channels * factor)


class CSPDarknet(nn.Module):
    """
    CSPDarknet-53 backbone.

    Five stages (stem, dark2 ... dark5) each halve the spatial size, so the
    stage outputs have strides 2, 4, 8, 16 and 32. ``forward`` returns a dict
    holding the stages named in ``out_features``.
    """

    def __init__(
        self,
        dep_mul,
        wid_mul,
        out_features=("dark3", "dark4", "dark5"),
        depthwise=False,
        act="silu",
    ):
        super().__init__()
        if dep_mul not in VALID_DEPTHS:
            raise ValueError("invalid depth value {}".format(dep_mul))
        if wid_mul not in VALID_WIDTHS:
            raise ValueError("invalid width value {}".format(wid_mul))
        if not out_features:
            raise ValueError("please provide output features of Darknet")
        unknown = [f for f in out_features if f not in STAGE_NAMES]
        if unknown:
            raise ValueError(
                "unknown output features {}, expected a subset of {}".format(
                    unknown, STAGE_NAMES
                )
            )

        self.out_features = tuple(out_features)
        Conv = DWConv if depthwise else BaseConv

        base_channels = expand(64, wid_mul)         # 64
        base_depth = max(round(dep_mul * 3), 1)     # 3

        # stem
        self.stem = Focus(3, base_channels, ksize=3, act=act)

        # dark2
        self.dark2 = nn.Sequential(
            Conv(base_channels, base_channels * 2, 3, 2, act=act),
            CSPLayer(
                base_channels * 2,
                base_channels * 2,
                n=base_depth,
                depthwise=depthwise,
                act=act,
            ),
        )

        # dark3
        self.dark3 = nn.Sequential(
            Conv(base_channels * 2, base_channels * 4, 3, 2, act=act),
            CSPLayer(
                base_channels * 4,
                base_channels * 4,
                n=base_depth * 3,
                depthwise=depthwise,
                act=act,
            ),
        )

        # dark4
        self.dark4 = nn.Sequential(
            Conv(base_channels * 4, base_channels * 8, 3, 2, act=act),
            CSPLayer(
                base_channels * 8,
                base_channels * 8,
                n=base_depth * 3,
                depthwise=depthwise,
                act=act,
            ),
        )

        # dark5, SPP runs before the CSP layer and the CSP layer has no residuals
        self.dark5 = nn.Sequential(
            Conv(base_channels * 8, base_channels * 16, 3, 2, act=act),
            SPPBottleneck(base_channels * 16, base_channels * 16, activation=act),
            CSPLayer(
                base_channels * 16,
                base_channels * 16,
                n=base_depth,
                shortcut=False,
                depthwise=depthwise,
                act=act,
            ),
        )

        stage_channels = (
            base_channels,
            base_channels * 2,
            base_channels * 4,
            base_channels * 8,
            base_channels * 16,
        )
        self._stage_channels = dict(zip(STAGE_NAMES, stage_channels))

    @property
    def out_channels(self):
        return OrderedDict(
            (f, self._stage_channels[f]) for f in STAGE_NAMES if f in self.out_features
        )

    def forward(self, x):
        outputs = OrderedDict()
        for name in STAGE_NAMES:
            x = getattr(self, name)(x)
            outputs[name] = x
        return OrderedDict((k, v) for k, v in outputs.items() if k in self.out_features)
