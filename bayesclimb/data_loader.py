#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
数据加载模块
将表格数据转换为带属性定义的完全观测数据集
"""
import pandas as pd
import numpy as np
from typing import Dict, Iterable, List, Optional

from bayesclimb.bayes.variables import Attribute
from bayesclimb.bayes.errors import UnknownAttributeError
from bayesclimb.utils.io import load_data
from bayesclimb.utils.logging import setup_logger

logger = setup_logger("data_loader")


class DataSet:
    """
    完全观测的数据集

    离散列存储取值编码（int），连续列保持原始数值。
    属性按ID（即列序号）排列。
    """

    def __init__(self, attributes: List[Attribute], frame: pd.DataFrame):
        """
        初始化数据集

        Args:
            attributes: 属性列表
            frame: 以属性名为列名的DataFrame，离散列必须已编码
        """
        self.attributes = sorted(attributes, key=lambda a: a.id)
        self._by_name = {attr.name: attr for attr in self.attributes}

        if len(self._by_name) != len(self.attributes):
            raise ValueError("属性名必须唯一")
        if len({attr.id for attr in self.attributes}) != len(self.attributes):
            raise ValueError("属性ID必须唯一")

        missing = [attr.name for attr in self.attributes if attr.name not in frame.columns]
        if missing:
            raise ValueError(f"数据中缺少属性列: {missing}")

        self.frame = frame[[attr.name for attr in self.attributes]].reset_index(drop=True)

        for attr in self.nominal_attributes:
            column = self.frame[attr.name]
            if column.isna().any():
                raise ValueError(f"属性 {attr.name} 存在缺失值，数据必须完全观测")
            codes = column.astype(np.int64)
            if ((codes < 0) | (codes >= attr.cardinality)).any():
                raise ValueError(f"属性 {attr.name} 存在非法取值编码")
            self.frame[attr.name] = codes

    @classmethod
    def from_dataframe(
        cls,
        df: pd.DataFrame,
        continuous: Optional[Iterable[str]] = None
    ) -> 'DataSet':
        """
        从原始DataFrame构造数据集

        离散属性的取值空间为该列去重后的取值（数值型按数值排序，其余按字符串排序）；
        非整数浮点列或在 continuous 中列出的列视为连续属性。

        Args:
            df: 原始数据
            continuous: 强制视为连续属性的列名

        Returns:
            DataSet
        """
        continuous = set(continuous or [])
        unknown = continuous - set(df.columns)
        if unknown:
            raise ValueError(f"连续属性列不存在: {sorted(unknown)}")

        attributes = []
        encoded = pd.DataFrame(index=df.index)

        for attr_id, name in enumerate(df.columns):
            column = df[name]
            if name in continuous or _looks_continuous(column):
                attributes.append(Attribute.continuous(name, attr_id))
                encoded[name] = column.astype(float)
                continue

            as_text = column.map(_value_to_text)
            values = sorted(as_text.dropna().unique(), key=_sort_key)
            attr = Attribute.nominal(name, attr_id, values)
            attributes.append(attr)
            encoded[name] = as_text.map(attr.value_map)

        dataset = cls(attributes, encoded)
        logger.info(
            f"数据集构造完成: {len(dataset)} 条记录, "
            f"{len(dataset.nominal_attributes)} 个离散属性, "
            f"{len(attributes) - len(dataset.nominal_attributes)} 个连续属性"
        )
        return dataset

    @classmethod
    def from_file(cls, file_path: str, continuous: Optional[Iterable[str]] = None) -> 'DataSet':
        """
        从CSV/Parquet文件加载数据集

        Args:
            file_path: 文件路径
            continuous: 强制视为连续属性的列名

        Returns:
            DataSet
        """
        logger.info(f"加载数据文件: {file_path}")
        return cls.from_dataframe(load_data(file_path), continuous=continuous)

    @property
    def nominal_attributes(self) -> List[Attribute]:
        return [attr for attr in self.attributes if attr.is_nominal]

    def attribute_by_name(self, name: str) -> Attribute:
        """
        按名称查找属性

        Args:
            name: 属性名

        Returns:
            Attribute
        """
        try:
            return self._by_name[name]
        except KeyError:
            raise UnknownAttributeError(f"数据集中不存在属性: {name}") from None

    def column(self, attribute: Attribute) -> pd.Series:
        return self.frame[attribute.name]

    def value_counts(self, attributes: List[Attribute]) -> Dict[tuple, int]:
        """
        统计一组属性取值组合的出现次数

        Args:
            attributes: 属性列表（顺序决定返回键中的顺序）

        Returns:
            取值编码元组 -> 频数
        """
        if not attributes:
            return {(): len(self.frame)}
        names = [attr.name for attr in attributes]
        grouped = self.frame.groupby(names, sort=True).size()
        counts = {}
        for key, count in grouped.items():
            if not isinstance(key, tuple):
                key = (key,)
            counts[tuple(int(v) for v in key)] = int(count)
        return counts

    def __len__(self):
        return len(self.frame)

    def __repr__(self):
        return f"DataSet(instances={len(self)}, attributes={[a.name for a in self.attributes]})"


def _value_to_text(value):
    """统一把取值转为字符串，整数型浮点去掉小数部分"""
    if pd.isna(value):
        return np.nan
    if isinstance(value, (float, np.floating)) and float(value).is_integer():
        return str(int(value))
    return str(value)


def _sort_key(text: str):
    """数值型取值按数值排序，其余按字符串排序"""
    try:
        return (0, float(text), text)
    except ValueError:
        return (1, 0.0, text)


def _looks_continuous(column: pd.Series) -> bool:
    """浮点列中存在非整数值时视为连续属性"""
    if not pd.api.types.is_float_dtype(column):
        return False
    values = column.dropna()
    return bool(len(values)) and not np.all(np.equal(np.mod(values, 1), 0))
