"""
Unit tests for deploy helpers: conv/bn fusion, module replacement, model info
"""

from copy import deepcopy

import torch
import torch.nn as nn

from cspdarknet.models import CSPDarknet, SiLU
from cspdarknet.models.network_blocks import BaseConv
from cspdarknet.utils import (
    fuse_conv_and_bn,
    fuse_model,
    get_model_info,
    initialize_batchnorm,
    replace_module,
)


def _warm_up(model, steps=3):
    # populate BatchNorm running statistics with non-trivial values
    model.train()
    with torch.no_grad():
        for _ in range(steps):
            model(torch.randn(4, 3, 64, 64))
    return model.eval()


def test_fuse_conv_and_bn_is_equivalent():
    conv = nn.Conv2d(4, 8, 3, padding=1, bias=False)
    bn = nn.BatchNorm2d(8)
    bn.running_mean.uniform_(-1, 1)
    bn.running_var.uniform_(0.5, 2)
    bn.weight.data.uniform_(0.5, 1.5)
    bn.bias.data.uniform_(-1, 1)
    bn.eval()

    fused = fuse_conv_and_bn(conv, bn)
    x = torch.randn(2, 4, 10, 10)
    assert fused.bias is not None
    assert torch.allclose(fused(x), bn(conv(x)), atol=1e-5)


def test_fuse_model_matches_unfused(small_input):
    model = _warm_up(CSPDarknet(0.33, 0.25))
    fused = fuse_model(deepcopy(model))

    assert not any(hasattr(m, "bn") for m in fused.modules() if isinstance(m, BaseConv))
    with torch.no_grad():
        expected = model(small_input)
        actual = fused(small_input)
    for name in expected:
        assert torch.allclose(actual[name], expected[name], atol=1e-3), name


def test_replace_module_swaps_silu(small_input):
    model = CSPDarknet(0.33, 0.25).eval()
    with torch.no_grad():
        expected = model(small_input)

    model = replace_module(model, nn.SiLU, SiLU)
    assert not any(isinstance(m, nn.SiLU) for m in model.modules())
    assert any(isinstance(m, SiLU) for m in model.modules())
    with torch.no_grad():
        actual = model(small_input)
    for name in expected:
        assert torch.allclose(actual[name], expected[name], atol=1e-6)


def test_replace_module_custom_func():
    model = nn.Sequential(nn.SiLU(), nn.Sequential(nn.SiLU()))
    model = replace_module(
        model, nn.SiLU, nn.LeakyReLU, replace_func=lambda old, new: new(0.2)
    )
    leaky = [m for m in model.modules() if isinstance(m, nn.LeakyReLU)]
    assert len(leaky) == 2
    assert all(m.negative_slope == 0.2 for m in leaky)


def test_get_model_info():
    model = CSPDarknet(0.33, 0.25)
    model.train()
    info = get_model_info(model, (64, 64))
    assert info.startswith("Params: ")
    assert "dark5: (1, 256, 2, 2)" in info
    assert model.training


def test_initialize_batchnorm():
    model = initialize_batchnorm(CSPDarknet(0.33, 0.25), eps=1e-4, momentum=0.1)
    bn = model.stem.conv.bn
    assert bn.eps == 1e-4
    assert bn.momentum == 0.1
