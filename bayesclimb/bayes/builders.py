#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
初始网络构造器
为结构搜索提供满足无环约束的起点
"""
from typing import List

from bayesclimb.bayes.structure import BayesianNetwork, Node
from bayesclimb.utils.logging import setup_logger

logger = setup_logger("bayes_builders")


class NetworkBuilder:
    """
    无边网络构造器

    每个离散属性一个节点，CPD按无父节点学习。连续属性不参与建模。
    """

    name = 'empty'

    def build(self, data, smoothing: float) -> BayesianNetwork:
        """
        构造网络

        Args:
            data: DataSet对象
            smoothing: Laplace平滑计数

        Returns:
            BayesianNetwork
        """
        network = BayesianNetwork(Node(attr) for attr in self._select_attributes(data))
        self._define_structure(network, data, smoothing)
        network.fit(data, smoothing)
        logger.info(f"初始网络已构造: {self.name}, 共 {network.num_edges()} 条边")
        return network

    def _select_attributes(self, data) -> List:
        skipped = [attr.name for attr in data.attributes if not attr.is_nominal]
        if skipped:
            logger.warning(f"连续属性不参与建模，跳过: {skipped}")
        return data.nominal_attributes

    def _define_structure(self, network: BayesianNetwork, data, smoothing: float) -> None:
        """子类在此添加初始边"""


EmptyNetworkBuilder = NetworkBuilder


class NaiveBayesBuilder(NetworkBuilder):
    """
    朴素贝叶斯结构构造器

    类别变量直接指向所有其他特征，特征间相互独立。
    """

    name = 'naive_bayes'

    def __init__(self, class_attribute: str):
        """
        Args:
            class_attribute: 类别变量名
        """
        if not class_attribute:
            raise ValueError("朴素贝叶斯结构需要指定类别变量")
        self.class_attribute = class_attribute

    def _define_structure(self, network: BayesianNetwork, data, smoothing: float) -> None:
        class_node = network.get_node(data.attribute_by_name(self.class_attribute))
        for node in network.get_nodes():
            if node is not class_node:
                network.create_edge(class_node, node, data, smoothing)


def get_builder(name: str, class_attribute: str = None) -> NetworkBuilder:
    """
    按名称创建初始网络构造器

    Args:
        name: 'empty' 或 'naive_bayes'
        class_attribute: 朴素贝叶斯的类别变量名

    Returns:
        NetworkBuilder实例
    """
    if name == EmptyNetworkBuilder.name:
        return EmptyNetworkBuilder()
    elif name == NaiveBayesBuilder.name:
        return NaiveBayesBuilder(class_attribute)
    else:
        raise ValueError(f"未知的初始结构类型: {name}")
