#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
测试评分函数
"""
import math
import unittest
import pandas as pd

from bayesclimb.bayes.builders import EmptyNetworkBuilder
from bayesclimb.bayes.scoring import (
    BICScore,
    LogLikelihoodScore,
    get_scoring_function,
    log_likelihood,
    num_parameters,
)
from bayesclimb.data_loader import DataSet


class TestScoring(unittest.TestCase):
    """测试对数似然与BIC"""

    def setUp(self):
        self.data = DataSet.from_dataframe(pd.DataFrame({
            'A': [0, 0, 1, 1, 1, 1],
            'B': [0, 0, 1, 1, 1, 0]
        }))
        self.net = EmptyNetworkBuilder().build(self.data, smoothing=1)
        self.a, self.b = self.net.get_nodes()

    def test_empty_network_log_likelihood(self):
        """无边网络: 各变量边际对数似然之和"""
        expected = (
            2 * math.log(3 / 8) + 4 * math.log(5 / 8)
            + 3 * math.log(4 / 8) + 3 * math.log(4 / 8)
        )
        self.assertAlmostEqual(log_likelihood(self.net, self.data), expected)
        self.assertAlmostEqual(LogLikelihoodScore().score_net(self.net, self.data), -expected)

    def test_bic_penalty(self):
        """BIC = -LL + log(N) / 2 * 参数个数"""
        self.assertEqual(num_parameters(self.net), 2)
        self.net.create_edge(self.a, self.b, self.data, 1)
        self.assertEqual(num_parameters(self.net), 3)
        expected = -log_likelihood(self.net, self.data) + math.log(6) / 2 * 3
        self.assertAlmostEqual(BICScore()(self.net, self.data), expected)

    def test_dependent_edge_lowers_score(self):
        """相关变量之间加边使负对数似然下降"""
        before = LogLikelihoodScore().score_net(self.net, self.data)
        self.net.create_edge(self.a, self.b, self.data, 1)
        self.assertLess(LogLikelihoodScore().score_net(self.net, self.data), before)

    def test_deterministic(self):
        """同一结构与数据的分数相同"""
        score = BICScore()
        self.assertEqual(score.score_net(self.net, self.data), score.score_net(self.net, self.data))

    def test_get_scoring_function(self):
        self.assertIsInstance(get_scoring_function('bic'), BICScore)
        self.assertIsInstance(get_scoring_function('log_likelihood'), LogLikelihoodScore)
        with self.assertRaises(ValueError):
            get_scoring_function('aic')


if __name__ == '__main__':
    unittest.main()
