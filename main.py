#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
主执行脚本
从表格数据学习贝叶斯网络结构并回答概率查询

用法示例:
    python main.py --data data/small.csv --scoring bic
    python main.py --data data/small.csv --query A=1 --given B=0
"""
import sys

from bayesclimb.main import main


if __name__ == '__main__':
    sys.exit(main())
