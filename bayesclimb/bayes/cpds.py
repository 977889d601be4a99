#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
条件概率分布（CPD）
从数据中统计条件概率表，父节点集合变化时原地重新计算
"""
import itertools
import pandas as pd
import numpy as np
from typing import Dict, Iterable, List, Mapping

from bayesclimb.bayes.variables import Attribute
from bayesclimb.bayes.errors import UnsupportedAttributeTypeError
from bayesclimb.utils.logging import setup_logger

logger = setup_logger("cpds")


class ConditionalDistribution:
    """
    条件概率分布 P(node | parents)

    只保存计数，概率在查询时按 Laplace 平滑计算:

        P(x | pa) = (N(x, pa) + l) / (N(pa) + l * k)

    其中 k 为节点取值个数。未出现过的父节点组合在 l = 0 时退化为均匀分布。
    结果只取决于（父节点集合, 数据, 平滑计数），因此重新计算是可复现的。
    """

    def __init__(self, attribute: Attribute):
        """
        初始化CPD

        Args:
            attribute: 节点对应的属性
        """
        self.attribute = attribute
        self.parents: List[Attribute] = []
        self.smoothing = 0
        self.counts: Dict[tuple, np.ndarray] = {}
        self.totals: Dict[tuple, float] = {}
        self.fitted = False

    def update(self, parents: Iterable[Attribute], data, smoothing: float) -> None:
        """
        根据当前父节点集合重新统计CPD（原地更新）

        Args:
            parents: 父节点属性
            data: DataSet对象
            smoothing: Laplace平滑计数
        """
        if smoothing < 0:
            raise ValueError(f"平滑计数不能为负: {smoothing}")

        self.parents = sorted(parents, key=lambda a: a.id)
        self.smoothing = smoothing

        if not self.attribute.is_nominal:
            # 连续节点不参与统计，查询时再报错
            logger.warning(f"节点 {self.attribute.name} 为连续属性，跳过CPD学习")
            self.counts, self.totals = {}, {}
            self.fitted = False
            return

        for parent in self.parents:
            if not parent.is_nominal:
                raise UnsupportedAttributeTypeError(
                    f"节点 {self.attribute.name} 的父节点 {parent.name} 为连续属性"
                )

        counts: Dict[tuple, np.ndarray] = {}
        for key, count in data.value_counts(self.parents + [self.attribute]).items():
            parent_values, value = key[:-1], key[-1]
            row = counts.setdefault(parent_values, np.zeros(self.attribute.cardinality))
            row[value] = count

        self.counts = counts
        self.totals = {cfg: float(row.sum()) for cfg, row in counts.items()}
        self.fitted = True

        logger.debug(
            f"节点 {self.attribute.name} 的CPD已更新，父节点: "
            f"{[p.name for p in self.parents]}, 父节点组合数: {len(counts)}"
        )

    def probability(self, value: int, parent_values: tuple) -> float:
        """
        查询 P(node = value | parents = parent_values)

        Args:
            value: 节点取值编码
            parent_values: 父节点取值编码元组（按父节点属性ID排序）

        Returns:
            概率值
        """
        self._check_fitted()
        if not self.attribute.is_valid_value_id(value):
            raise ValueError(f"{value} 不是属性 {self.attribute.name} 的合法取值编码")

        k = self.attribute.cardinality
        row = self.counts.get(parent_values)
        count = float(row[value]) if row is not None else 0.0
        total = self.totals.get(parent_values, 0.0)

        denominator = total + self.smoothing * k
        if denominator == 0:
            return 1.0 / k
        return (count + self.smoothing) / denominator

    def query(self, value: int, assignment: Mapping[Attribute, int]) -> float:
        """
        根据完整赋值查询条件概率

        Args:
            value: 节点取值编码
            assignment: 属性 -> 取值编码，至少包含所有父节点

        Returns:
            概率值
        """
        try:
            parent_values = tuple(assignment[parent] for parent in self.parents)
        except KeyError as e:
            raise ValueError(f"查询节点 {self.attribute.name} 时缺少父节点 {e.args[0]} 的取值") from None
        return self.probability(value, parent_values)

    def log_likelihood(self, data) -> float:
        """
        数据在该CPD下的对数似然 sum log P(x | pa)

        Args:
            data: DataSet对象

        Returns:
            对数似然
        """
        self._check_fitted()
        total = 0.0
        for key, count in data.value_counts(self.parents + [self.attribute]).items():
            total += count * np.log(self.probability(key[-1], key[:-1]))
        return float(total)

    def num_parameters(self) -> int:
        """自由参数个数 (k - 1) * prod(父节点取值个数)"""
        configs = 1
        for parent in self.parents:
            configs *= parent.cardinality
        return (self.attribute.cardinality - 1) * configs

    def to_frame(self) -> pd.DataFrame:
        """
        导出完整条件概率表

        Returns:
            行为父节点取值组合、列为节点取值的DataFrame
        """
        self._check_fitted()
        configs = list(itertools.product(*(p.value_codes() for p in self.parents)))
        rows = [
            [self.probability(value, cfg) for value in self.attribute.value_codes()]
            for cfg in configs
        ]
        if self.parents:
            index = pd.MultiIndex.from_tuples(
                [tuple(p.value_name(v) for p, v in zip(self.parents, cfg)) for cfg in configs],
                names=[p.name for p in self.parents]
            )
        else:
            index = pd.Index(['-'], name='(prior)')
        return pd.DataFrame(rows, index=index, columns=list(self.attribute.values))

    def _check_fitted(self) -> None:
        if not self.attribute.is_nominal:
            raise UnsupportedAttributeTypeError(
                f"连续属性 {self.attribute.name} 不支持条件概率查询"
            )
        if not self.fitted:
            raise ValueError(f"节点 {self.attribute.name} 的CPD尚未学习")

    def __str__(self):
        if not self.attribute.is_nominal or not self.fitted:
            return f"P({self.attribute.name}) <未学习>"
        return self.to_frame().to_string()
