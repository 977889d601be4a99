#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
工具模块
"""
from bayesclimb.utils.io import load_data, save_metadata
from bayesclimb.utils.logging import setup_logger, set_level
from bayesclimb.utils.config import load_config, merge_config, ensure_dir

__all__ = [
    'load_data',
    'save_metadata',
    'setup_logger',
    'set_level',
    'load_config',
    'merge_config',
    'ensure_dir'
]
