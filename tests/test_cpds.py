#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
测试条件概率分布
"""
import math
import unittest
import pandas as pd

from bayesclimb.bayes.variables import Attribute
from bayesclimb.bayes.cpds import ConditionalDistribution
from bayesclimb.bayes.errors import UnsupportedAttributeTypeError
from bayesclimb.data_loader import DataSet


class TestConditionalDistribution(unittest.TestCase):
    """测试CPD的计数与平滑"""

    def setUp(self):
        # rain: 0/1，grass: 0/1/2（取值2从未出现）
        self.rain = Attribute.nominal('rain', 0, ['no', 'yes'])
        self.grass = Attribute.nominal('grass', 1, ['dry', 'wet', 'flooded'])
        self.data = DataSet([self.rain, self.grass], pd.DataFrame({
            'rain':  [1, 1, 1, 1, 0, 0, 0, 0, 0, 0],
            'grass': [1, 1, 1, 0, 0, 0, 0, 0, 0, 1]
        }))

    def test_prior_laplace(self):
        """无父节点: (N(x) + l) / (N + l * k)"""
        cpd = ConditionalDistribution(self.rain)
        cpd.update([], self.data, smoothing=1)
        self.assertAlmostEqual(cpd.query(1, {}), (4 + 1) / (10 + 2))
        self.assertAlmostEqual(cpd.query(0, {}), (6 + 1) / (10 + 2))

    def test_conditional_laplace(self):
        """有父节点: (N(x, pa) + l) / (N(pa) + l * k)"""
        cpd = ConditionalDistribution(self.grass)
        cpd.update([self.rain], self.data, smoothing=1)
        self.assertAlmostEqual(cpd.query(1, {self.rain: 1}), (3 + 1) / (4 + 3))
        self.assertAlmostEqual(cpd.query(2, {self.rain: 1}), (0 + 1) / (4 + 3))
        self.assertAlmostEqual(cpd.query(0, {self.rain: 0}), (5 + 1) / (6 + 3))

    def test_rows_sum_to_one(self):
        """每个父节点组合下的分布和为1"""
        cpd = ConditionalDistribution(self.grass)
        cpd.update([self.rain], self.data, smoothing=2)
        table = cpd.to_frame()
        for total in table.sum(axis=1):
            self.assertAlmostEqual(total, 1.0)

    def test_unseen_configuration_without_smoothing(self):
        """l = 0 时未出现的父节点组合退化为均匀分布"""
        data = DataSet([self.rain, self.grass], pd.DataFrame({'rain': [0, 0], 'grass': [0, 1]}))
        cpd = ConditionalDistribution(self.grass)
        cpd.update([self.rain], data, smoothing=0)
        self.assertAlmostEqual(cpd.query(0, {self.rain: 1}), 1 / 3)
        self.assertAlmostEqual(cpd.query(0, {self.rain: 0}), 0.5)
        self.assertEqual(cpd.query(2, {self.rain: 0}), 0.0)

    def test_missing_parent_value(self):
        """查询时缺少父节点取值"""
        cpd = ConditionalDistribution(self.grass)
        cpd.update([self.rain], self.data, smoothing=1)
        with self.assertRaises(ValueError):
            cpd.query(0, {})

    def test_num_parameters(self):
        """自由参数个数"""
        cpd = ConditionalDistribution(self.grass)
        cpd.update([self.rain], self.data, smoothing=1)
        self.assertEqual(cpd.num_parameters(), (3 - 1) * 2)

    def test_log_likelihood_matches_queries(self):
        """对数似然等于逐条记录的 log P 之和"""
        cpd = ConditionalDistribution(self.grass)
        cpd.update([self.rain], self.data, smoothing=1)
        expected = sum(
            math.log(cpd.query(int(g), {self.rain: int(r)}))
            for r, g in zip(self.data.frame['rain'], self.data.frame['grass'])
        )
        self.assertAlmostEqual(cpd.log_likelihood(self.data), expected)

    def test_continuous_attribute(self):
        """连续属性的CPD不可查询"""
        temp = Attribute.continuous('temp', 2)
        data = DataSet([self.rain, temp], pd.DataFrame({'rain': [0, 1], 'temp': [1.5, 2.5]}))
        cpd = ConditionalDistribution(temp)
        cpd.update([], data, smoothing=1)
        with self.assertRaises(UnsupportedAttributeTypeError):
            cpd.query(0, {})

        with self.assertRaises(UnsupportedAttributeTypeError):
            ConditionalDistribution(self.rain).update([temp], data, smoothing=1)


if __name__ == '__main__':
    unittest.main()
