#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
网络评分函数
给定网络与数据返回一个实数，约定越小越好
"""
from abc import ABC, abstractmethod
import numpy as np


class ScoringFunction(ABC):
    """
    评分函数接口

    对固定的（网络结构, 数据）必须是确定的。
    """

    name = 'abstract'

    @abstractmethod
    def score_net(self, network, data) -> float:
        """
        对网络评分

        Args:
            network: BayesianNetwork对象（CPD已按当前结构计算）
            data: DataSet对象

        Returns:
            分数（越小越好）
        """

    def __call__(self, network, data) -> float:
        return self.score_net(network, data)

    def __repr__(self):
        return f"{type(self).__name__}()"


def log_likelihood(network, data) -> float:
    """
    数据在网络下的对数似然 sum_i sum_n log P(x_i | pa_i)

    Args:
        network: BayesianNetwork对象
        data: DataSet对象

    Returns:
        对数似然
    """
    return float(sum(node.cpd.log_likelihood(data) for node in network.get_nodes()))


def num_parameters(network) -> int:
    """网络的自由参数个数"""
    return sum(node.cpd.num_parameters() for node in network.get_nodes())


class LogLikelihoodScore(ScoringFunction):
    """负对数似然"""

    name = 'log_likelihood'

    def score_net(self, network, data) -> float:
        return -log_likelihood(network, data)


class BICScore(ScoringFunction):
    """
    BIC分数（取负号使其越小越好）

        BIC = -LL + log(N) / 2 * 参数个数
    """

    name = 'bic'

    def score_net(self, network, data) -> float:
        n = len(data)
        if n == 0:
            raise ValueError("数据集为空，无法计算BIC")
        penalty = np.log(n) / 2.0 * num_parameters(network)
        return float(-log_likelihood(network, data) + penalty)


SCORING_FUNCTIONS = {
    LogLikelihoodScore.name: LogLikelihoodScore,
    BICScore.name: BICScore,
}


def get_scoring_function(name: str) -> ScoringFunction:
    """
    按名称创建评分函数

    Args:
        name: 'log_likelihood' 或 'bic'

    Returns:
        ScoringFunction实例
    """
    try:
        return SCORING_FUNCTIONS[name]()
    except KeyError:
        raise ValueError(f"未知的评分函数: {name}，可选: {sorted(SCORING_FUNCTIONS)}") from None
