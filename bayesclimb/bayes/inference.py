#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
贝叶斯推断
基于CPD的精确枚举推断（联合概率与条件概率）
"""
from dataclasses import dataclass
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

from bayesclimb.bayes.variables import Attribute
from bayesclimb.bayes.errors import (
    DegenerateConditioningError,
    UnsupportedAttributeTypeError,
)
from bayesclimb.utils.logging import setup_logger

logger = setup_logger("bayes_inference")


@dataclass(frozen=True)
class JointQuery:
    """
    联合概率查询，例如 P(A = a, D = d)

    Attributes:
        variables: (属性, 取值编码) 序列，属性互不相同
    """
    variables: Tuple[Tuple[Attribute, int], ...]

    def __post_init__(self):
        variables = tuple((attr, int(code)) for attr, code in self.variables)
        attributes = [attr for attr, _ in variables]
        if len(set(attributes)) != len(attributes):
            raise ValueError(f"联合查询中的属性必须互不相同: {[a.name for a in attributes]}")
        for attr, code in variables:
            if attr.is_nominal and not attr.is_valid_value_id(code):
                raise ValueError(f"{code} 不是属性 {attr.name} 的合法取值编码")
        object.__setattr__(self, 'variables', variables)

    @classmethod
    def of(cls, assignment: Mapping[Attribute, int]) -> 'JointQuery':
        """由 属性 -> 取值编码 映射构造查询"""
        return cls(tuple(assignment.items()))

    @classmethod
    def from_names(cls, data, assignment: Mapping[str, str]) -> 'JointQuery':
        """
        由 属性名 -> 取值名 映射构造查询

        Args:
            data: 提供 attribute_by_name 的数据集
            assignment: 属性名 -> 取值名

        Returns:
            JointQuery
        """
        variables = []
        for name, value in assignment.items():
            attr = data.attribute_by_name(name)
            variables.append((attr, attr.value_id(value)))
        return cls(tuple(variables))

    @property
    def attributes(self) -> List[Attribute]:
        return [attr for attr, _ in self.variables]

    def as_dict(self) -> Dict[Attribute, int]:
        return dict(self.variables)

    def __str__(self):
        terms = ", ".join(f"{attr.name} = {_format_value(attr, code)}" for attr, code in self.variables)
        return f"P({terms})"


@dataclass(frozen=True)
class ConditionalQuery:
    """
    条件概率查询，例如 P(A = a | E = e, D = d)

    Attributes:
        target: 目标变量
        condition: 条件变量（与目标变量不相交）
    """
    target: JointQuery
    condition: JointQuery

    def __post_init__(self):
        overlap = set(self.target.attributes) & set(self.condition.attributes)
        if overlap:
            raise ValueError(f"目标变量与条件变量不能重叠: {sorted(a.name for a in overlap)}")

    def all_variables(self) -> JointQuery:
        """目标变量与条件变量的并集"""
        return JointQuery(self.target.variables + self.condition.variables)

    def __str__(self):
        target = str(self.target)[2:-1]
        condition = str(self.condition)[2:-1]
        return f"P({target} | {condition})"


class EnumerationInference:
    """
    枚举推断器

    对查询变量的祖先闭包做完全枚举。例如网络 B -> A, C -> A, C -> D，
    查询 P(A = a, D = d) 时计算:

        sum_b sum_c P(A = a | B = b, C = c) * P(B = b) * P(D = d | C = c) * P(C = c)
    """

    def __init__(self, network):
        """
        初始化推断器

        Args:
            network: BayesianNetwork对象
        """
        self.network = network

    def query_joint_probability(self, query: JointQuery) -> float:
        """
        计算联合概率

        Args:
            query: 联合概率查询

        Returns:
            概率值
        """
        # 查询变量的祖先闭包之外的节点不影响结果
        all_nodes = set()
        for attribute in query.attributes:
            all_nodes |= self.network.get_nodes_above(self.network.get_node(attribute))

        ordered = sorted(all_nodes, key=lambda n: n.attribute.id)
        for node in ordered:
            if not node.attribute.is_nominal:
                raise UnsupportedAttributeTypeError(
                    f"连续属性 {node.name} 无法参与枚举推断"
                )

        specified = query.as_dict()
        unspecified = [node for node in ordered if node.attribute not in specified]

        probability = self._enumerate(ordered, unspecified, 0, dict(specified))
        logger.debug(f"{query} = {probability}")
        return probability

    def query_conditional_probability(self, query: ConditionalQuery) -> float:
        """
        计算条件概率 P(target | condition) = P(target, condition) / P(condition)

        Args:
            query: 条件概率查询

        Returns:
            概率值
        """
        numerator = self.query_joint_probability(query.all_variables())
        denominator = self.query_joint_probability(query.condition)

        if denominator == 0:
            raise DegenerateConditioningError(
                f"条件 {query.condition} 的概率为0，{query} 无定义"
            )
        return numerator / denominator

    def query_distribution(
        self,
        attribute: Attribute,
        condition: Optional[JointQuery] = None
    ) -> Dict[str, float]:
        """
        计算单个变量在给定条件下的后验分布

        Args:
            attribute: 目标属性
            condition: 条件，None表示无条件（边际分布）

        Returns:
            取值名 -> 概率
        """
        condition = condition or JointQuery(())
        if not attribute.is_nominal:
            raise UnsupportedAttributeTypeError(f"连续属性 {attribute.name} 无法参与枚举推断")

        distribution = {}
        for code in attribute.value_codes():
            target = JointQuery(((attribute, code),))
            distribution[attribute.value_name(code)] = self.query_conditional_probability(
                ConditionalQuery(target, condition)
            )
        return distribution

    def _enumerate(self, nodes: List, unspecified: List, index: int,
                   assignment: Dict[Attribute, int]) -> float:
        """
        递归枚举未指定节点的所有取值

        Args:
            nodes: 参与计算的全部节点（固定顺序）
            unspecified: 需要求和的节点
            index: 当前处理到 unspecified 中的位置
            assignment: 当前赋值，原地扩展并在返回前恢复

        Returns:
            该前缀下所有项之和
        """
        if index == len(unspecified):  # 终止条件
            return self._calculate_term(nodes, assignment)

        attribute = unspecified[index].attribute
        total = 0.0
        for code in attribute.value_codes():
            assignment[attribute] = code
            total += self._enumerate(nodes, unspecified, index + 1, assignment)
        del assignment[attribute]
        return total

    @staticmethod
    def _calculate_term(nodes: Iterable, assignment: Mapping[Attribute, int]) -> float:
        """枚举中的一项: 各节点 P(取值 | 父节点取值) 的乘积"""
        product = 1.0
        for node in nodes:
            product *= node.query(assignment[node.attribute], assignment)
        return product


def _format_value(attribute: Attribute, code: int) -> str:
    return attribute.value_name(code) if attribute.is_nominal else str(code)
