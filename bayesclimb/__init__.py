#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
BayesClimbNet
离散贝叶斯网络的爬山法结构学习与精确枚举推断
"""
__version__ = "0.1.0"
