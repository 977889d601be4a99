#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
测试属性定义与数据集构造
"""
import unittest
import dataclasses
import pandas as pd

from bayesclimb.bayes.variables import Attribute, AttributeType
from bayesclimb.bayes.errors import UnknownAttributeError
from bayesclimb.data_loader import DataSet


class TestAttribute(unittest.TestCase):
    """测试属性"""

    def setUp(self):
        self.attr = Attribute.nominal('weather', 0, ['sunny', 'rainy', 'cloudy'])

    def test_value_mapping(self):
        """取值名与编码互相转换"""
        self.assertEqual(self.attr.value_map, {'sunny': 0, 'rainy': 1, 'cloudy': 2})
        self.assertEqual(self.attr.value_name(1), 'rainy')
        self.assertEqual(self.attr.value_id('cloudy'), 2)
        self.assertEqual(self.attr.cardinality, 3)
        self.assertTrue(self.attr.is_valid_value_id(2))
        self.assertFalse(self.attr.is_valid_value_id(3))

    def test_invalid_values(self):
        """非法取值报错"""
        with self.assertRaises(ValueError):
            self.attr.value_name(5)
        with self.assertRaises(ValueError):
            self.attr.value_id('snowy')
        with self.assertRaises(ValueError):
            Attribute.nominal('dup', 1, ['a', 'a'])
        with self.assertRaises(ValueError):
            Attribute.nominal('dup', 1, [1, '1'])
        with self.assertRaises(ValueError):
            Attribute('empty', 2, AttributeType.NOMINAL, ())

    def test_continuous(self):
        """连续属性没有取值空间"""
        temp = Attribute.continuous('temperature', 3)
        self.assertFalse(temp.is_nominal)
        self.assertEqual(temp.cardinality, 0)
        with self.assertRaises(ValueError):
            temp.value_id('1')

    def test_immutable(self):
        """属性不可变"""
        with self.assertRaises(dataclasses.FrozenInstanceError):
            self.attr.name = 'other'


class TestDataSet(unittest.TestCase):
    """测试数据集构造"""

    def setUp(self):
        self.df = pd.DataFrame({
            'size': [10, 2, 2, 1],
            'color': ['red', 'blue', 'red', 'red'],
            'weight': [0.5, 1.25, 3.0, 2.75]
        })
        self.data = DataSet.from_dataframe(self.df)

    def test_attributes(self):
        """属性按列序号编号，连续列被识别"""
        names = [attr.name for attr in self.data.attributes]
        self.assertEqual(names, ['size', 'color', 'weight'])
        self.assertEqual([attr.id for attr in self.data.attributes], [0, 1, 2])
        self.assertEqual([a.name for a in self.data.nominal_attributes], ['size', 'color'])
        self.assertFalse(self.data.attribute_by_name('weight').is_nominal)

    def test_numeric_domain_order(self):
        """数值型取值按数值排序"""
        size = self.data.attribute_by_name('size')
        self.assertEqual(size.values, ('1', '2', '10'))
        self.assertEqual(list(self.data.column(size)), [2, 1, 1, 0])

    def test_unknown_attribute(self):
        """按名称查找不存在的属性"""
        with self.assertRaises(UnknownAttributeError):
            self.data.attribute_by_name('shape')

    def test_value_counts(self):
        """取值组合计数"""
        color = self.data.attribute_by_name('color')
        size = self.data.attribute_by_name('size')
        self.assertEqual(self.data.value_counts([]), {(): 4})
        self.assertEqual(self.data.value_counts([color]), {(0,): 1, (1,): 3})
        counts = self.data.value_counts([size, color])
        self.assertEqual(counts[(1, 0)], 1)
        self.assertEqual(counts[(1, 1)], 1)
        self.assertEqual(sum(counts.values()), 4)

    def test_forced_continuous(self):
        """指定列强制为连续属性"""
        data = DataSet.from_dataframe(self.df, continuous=['size'])
        self.assertFalse(data.attribute_by_name('size').is_nominal)
        with self.assertRaises(ValueError):
            DataSet.from_dataframe(self.df, continuous=['missing'])

    def test_missing_values_rejected(self):
        """离散列不允许缺失值"""
        attr = Attribute.nominal('x', 0, ['0', '1'])
        with self.assertRaises(ValueError):
            DataSet([attr], pd.DataFrame({'x': [0, None]}))
        with self.assertRaises(ValueError):
            DataSet([attr], pd.DataFrame({'x': [0, 2]}))


if __name__ == '__main__':
    unittest.main()
