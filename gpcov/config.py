# gpcov/config.py
# --------------------------------------------------------------
# Author: Emmanuel Vazquez <emmanuel.vazquez@centralesupelec.fr>
# Copyright (c) 2022-2026, CentraleSupelec
# License: GPLv3 (see LICENSE)
# --------------------------------------------------------------
import os
import logging

# Read version from VERSION file
_version_file = os.path.join(os.path.dirname(__file__), "..", "VERSION")
try:
    with open(os.path.abspath(_version_file), "r") as f:
        __version__ = f.read().strip()
except FileNotFoundError:
    __version__ = "0.0.0"


class _GPcovConfig:
    def __init__(self):
        self.version = __version__
        self.dtype = float
        self.check_finite = False
        # logger lives in config
        self.logger = logging.getLogger("gpcov")
        if not self.logger.handlers:
            h = logging.StreamHandler()
            h.setFormatter(logging.Formatter("[%(levelname)s] %(message)s"))
            self.logger.addHandler(h)
        self.logger.setLevel(logging.WARNING)

    def __str__(self):
        return (
            f"GPcovConfig("
            f"version={self.version}, "
            f"dtype={self.dtype}, "
            f"check_finite={self.check_finite})"
        )

    def __repr__(self):
        return (
            f"<GPcovConfig "
            f"version={self.version!r}, "
            f"dtype={self.dtype!r}, "
            f"check_finite={self.check_finite!r}>"
        )

    def update(self, **kwargs):
        for k, v in kwargs.items():
            if not hasattr(self, k):
                raise AttributeError(f"unknown configuration entry '{k}'")
            setattr(self, k, v)
        return self


_config = _GPcovConfig()


def get_config():
    return _config


def set_check_finite(flag: bool):
    """Reject point sets containing nan or inf before filling matrices."""
    _config.check_finite = bool(flag)


def get_logger():
    return _config.logger


def set_log_level(level):
    _config.logger.setLevel(level)
