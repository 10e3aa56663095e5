"""
Shared fixtures for the CSPDarknet test-suite
"""

import pytest
import torch


@pytest.fixture(autouse=True)
def seed():
    torch.manual_seed(0)


@pytest.fixture
def device():
    return torch.device("cpu")


@pytest.fixture
def small_input(device):
    # 64x64 keeps every stage, down to 2x2 at stride 32
    return torch.randn(2, 3, 64, 64, device=device)
