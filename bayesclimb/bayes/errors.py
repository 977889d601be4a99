#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
贝叶斯网络异常类型
结构错误属于调用方错误（未先做合法性检查），推断错误返回给调用方处理
"""


class BayesNetError(Exception):
    """贝叶斯网络相关异常的基类"""


class UnknownAttributeError(BayesNetError, KeyError):
    """查询或操作引用了网络/数据集中不存在的属性"""

    def __str__(self):
        # KeyError 默认会给消息加引号
        return str(self.args[0]) if self.args else ''


class EdgeNotFoundError(BayesNetError):
    """删除或反转一条不存在的边"""


class InvalidStructureError(BayesNetError):
    """结构修改违反前置条件（自环、重复边或产生环）"""


class UnsupportedAttributeTypeError(BayesNetError):
    """连续型属性进入了枚举推断"""


class DegenerateConditioningError(BayesNetError, ZeroDivisionError):
    """条件概率的分母（条件的联合概率）为零"""
