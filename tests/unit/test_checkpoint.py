"""
Unit tests for loading pretrained backbone weights
"""

import pytest
import torch

from cspdarknet.models import CSPDarknet
from cspdarknet.utils import load_ckpt, load_pretrained


def _assert_same_weights(a, b):
    state_b = b.state_dict()
    for k, v in a.state_dict().items():
        assert torch.equal(v, state_b[k]), k


def test_load_bare_state_dict(tmp_path):
    src = CSPDarknet(0.33, 0.25)
    path = tmp_path / "darknet.pth"
    torch.save(src.state_dict(), path)

    dst = load_pretrained(CSPDarknet(0.33, 0.25), str(path))
    _assert_same_weights(src, dst)


@pytest.mark.parametrize("prefix", ["backbone.backbone.", "backbone."])
def test_load_detector_checkpoint(tmp_path, prefix):
    src = CSPDarknet(0.33, 0.25)
    state = {prefix + k: v for k, v in src.state_dict().items()}
    # neck/head weights are ignored
    state["head.cls_preds.0.weight"] = torch.zeros(1)
    path = tmp_path / "yolox_nano.pth"
    torch.save({"model": state, "start_epoch": 300}, path)

    dst = load_pretrained(CSPDarknet(0.33, 0.25), str(path))
    _assert_same_weights(src, dst)


def test_load_ckpt_skips_mismatched_shapes():
    src = CSPDarknet(0.33, 0.5)
    dst = CSPDarknet(0.33, 0.25)
    before = {k: v.clone() for k, v in dst.state_dict().items()}

    load_ckpt(dst, src.state_dict())

    # every conv weight differs in shape, so nothing is overwritten
    for k, v in dst.state_dict().items():
        if k.endswith("conv.weight"):
            assert torch.equal(v, before[k]), k


def test_load_ckpt_partial():
    src = CSPDarknet(0.33, 0.25)
    partial = {k: v for k, v in src.state_dict().items() if k.startswith("stem.")}
    dst = load_ckpt(CSPDarknet(0.33, 0.25), partial)
    assert torch.equal(dst.stem.conv.conv.weight, src.stem.conv.conv.weight)


def test_missing_checkpoint_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_pretrained(CSPDarknet(0.33, 0.25), str(tmp_path / "missing.pth"))
