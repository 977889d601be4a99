#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
贝叶斯网络DAG结构定义
节点、父子关系以及保持无环性的结构修改
"""
from typing import Dict, Iterable, List, Mapping, Set, Tuple
import networkx as nx

from bayesclimb.bayes.variables import Attribute
from bayesclimb.bayes.cpds import ConditionalDistribution
from bayesclimb.bayes.inference import EnumerationInference
from bayesclimb.bayes.errors import (
    EdgeNotFoundError,
    InvalidStructureError,
    UnknownAttributeError,
)
from bayesclimb.utils.logging import setup_logger

logger = setup_logger("bayes_structure")


class Node:
    """
    网络节点

    持有一个属性及其CPD；父子集合只是对其他节点的引用。
    不变式: p in node.parents <=> node in p.children
    """

    def __init__(self, attribute: Attribute):
        self.attribute = attribute
        self.parents: Set['Node'] = set()
        self.children: Set['Node'] = set()
        self.cpd = ConditionalDistribution(attribute)

    @property
    def name(self) -> str:
        return self.attribute.name

    def sorted_parents(self) -> List['Node']:
        """父节点（按属性ID排序）"""
        return sorted(self.parents, key=lambda n: n.attribute.id)

    def sorted_children(self) -> List['Node']:
        return sorted(self.children, key=lambda n: n.attribute.id)

    def update_cpd(self, data, smoothing: float) -> None:
        """按当前父节点集合重新计算CPD"""
        self.cpd.update([p.attribute for p in self.parents], data, smoothing)

    def query(self, value: int, assignment: Mapping[Attribute, int]) -> float:
        return self.cpd.query(value, assignment)

    def __repr__(self):
        return f"Node({self.name})"


class BayesianNetwork:
    """
    贝叶斯网络

    属性 -> 节点的映射按属性ID有序保存，所有遍历顺序因此是确定的。
    每次结构修改后网络都保持为有向无环图。
    """

    def __init__(self, nodes: Iterable[Node] = ()):
        """
        初始化网络

        Args:
            nodes: 初始节点
        """
        self.nodes: Dict[Attribute, Node] = {}
        for node in nodes:
            self.add_node(node)

    # ------------------------------------------------------------------
    # 节点
    # ------------------------------------------------------------------

    def add_node(self, node: Node) -> None:
        """
        添加节点

        Args:
            node: 新节点
        """
        if node.attribute in self.nodes:
            raise InvalidStructureError(f"节点 {node.name} 已存在于网络中")
        if any(a.id == node.attribute.id for a in self.nodes):
            raise InvalidStructureError(f"属性ID {node.attribute.id} 重复")
        self.nodes[node.attribute] = node
        self.nodes = dict(sorted(self.nodes.items(), key=lambda item: item[0].id))

    def get_node(self, attribute: Attribute) -> Node:
        """
        按属性获取节点

        Args:
            attribute: 属性

        Returns:
            对应节点
        """
        try:
            return self.nodes[attribute]
        except KeyError:
            raise UnknownAttributeError(f"网络中不存在属性: {attribute.name}") from None

    def get_node_by_name(self, name: str) -> Node:
        for attribute, node in self.nodes.items():
            if attribute.name == name:
                return node
        raise UnknownAttributeError(f"网络中不存在属性: {name}")

    def get_nodes(self) -> List[Node]:
        """所有节点（按属性ID排序）"""
        return list(self.nodes.values())

    def fit(self, data, smoothing: float) -> None:
        """
        重新计算所有节点的CPD

        Args:
            data: DataSet对象
            smoothing: Laplace平滑计数
        """
        for node in self.nodes.values():
            node.update_cpd(data, smoothing)
        logger.info(f"网络CPD学习完成，共 {len(self.nodes)} 个节点")

    # ------------------------------------------------------------------
    # 结构修改
    # ------------------------------------------------------------------

    def create_edge(self, parent: Node, child: Node, data, smoothing: float,
                    validate: bool = True) -> None:
        """
        添加有向边 parent -> child，并重新计算子节点的CPD

        Args:
            parent: 父节点
            child: 子节点
            data: DataSet对象
            smoothing: Laplace平滑计数
            validate: 是否检查该边会不会产生环；已用 is_valid_edge 检查过时可关闭
        """
        if parent is child:
            raise InvalidStructureError(f"不允许自环: {parent.name}")
        if self.does_edge_exist(parent, child):
            raise InvalidStructureError(f"边已存在: {parent.name} -> {child.name}")
        if validate and not self.is_valid_edge(parent, child):
            raise InvalidStructureError(f"添加边 {parent.name} -> {child.name} 会产生环")

        parent.children.add(child)
        child.parents.add(parent)
        child.update_cpd(data, smoothing)
        logger.debug(f"添加边: {parent.name} -> {child.name}")

    def remove_edge(self, parent: Node, child: Node, data, smoothing: float) -> None:
        """
        删除有向边 parent -> child，并重新计算子节点的CPD

        Args:
            parent: 父节点
            child: 子节点
            data: DataSet对象
            smoothing: Laplace平滑计数
        """
        if not self.does_edge_exist(parent, child):
            raise EdgeNotFoundError(f"边不存在: {parent.name} -> {child.name}")

        parent.children.discard(child)
        child.parents.discard(parent)
        child.update_cpd(data, smoothing)
        logger.debug(f"删除边: {parent.name} -> {child.name}")

    def reverse_edge(self, parent: Node, child: Node, data, smoothing: float,
                     validate: bool = True) -> None:
        """
        反转有向边 parent -> child 为 child -> parent，两端节点的CPD都会重新计算

        Args:
            parent: 原父节点
            child: 原子节点
            data: DataSet对象
            smoothing: Laplace平滑计数
            validate: 是否检查反转后会不会产生环
        """
        if not self.does_edge_exist(parent, child):
            raise EdgeNotFoundError(f"边不存在: {parent.name} -> {child.name}")
        if validate and not self.is_valid_reverse_edge(parent, child):
            raise InvalidStructureError(f"反转边 {parent.name} -> {child.name} 会产生环")

        self.remove_edge(parent, child, data, smoothing)
        self.create_edge(child, parent, data, smoothing, validate=False)

    # ------------------------------------------------------------------
    # 结构查询
    # ------------------------------------------------------------------

    def does_edge_exist(self, parent: Node, child: Node) -> bool:
        return child in parent.children

    def is_valid_edge(self, parent: Node, child: Node) -> bool:
        """
        判断能否添加边 parent -> child

        要求边不存在、不是自环，且 child 不是 parent 的祖先。

        Args:
            parent: 父节点
            child: 子节点

        Returns:
            是否合法
        """
        if parent is child or self.does_edge_exist(parent, child):
            return False
        return child not in self.get_nodes_above(parent)

    def is_valid_reverse_edge(self, parent: Node, child: Node) -> bool:
        """
        判断能否把边 parent -> child 反转

        反转后不产生环，等价于除了这条直接边之外 parent 没有其他到 child 的路径。

        Args:
            parent: 原父节点
            child: 原子节点

        Returns:
            是否合法
        """
        if not self.does_edge_exist(parent, child):
            return False
        visited = {}
        for other in child.parents:
            if other is not parent and parent in self._nodes_above(other, frozenset(), visited):
                return False
        return True

    def get_nodes_above(self, node: Node) -> Set[Node]:
        """
        获取节点自身及其所有祖先（祖先闭包）

        例如网络 A -> B, D -> A, E -> A:
        对 B 返回 {B, A, D, E}，对 A 返回 {A, D, E}。

        Args:
            node: 查询节点

        Returns:
            祖先闭包
        """
        return set(self._nodes_above(node, path=frozenset(), visited={}))

    def _nodes_above(self, node: Node, path: frozenset,
                     visited: Dict[Node, Set[Node]]) -> Set[Node]:
        """
        递归求祖先闭包

        Args:
            node: 当前节点
            path: 当前递归路径上的节点，用于发现环
            visited: 已完成节点 -> 其祖先闭包，每个节点只展开一次
        """
        if node in path:
            raise InvalidStructureError(f"网络中存在经过节点 {node.name} 的环")
        if node in visited:
            return visited[node]

        above = {node}
        if node.parents:
            path = path | {node}
            for parent in node.parents:
                if parent not in above:
                    above |= self._nodes_above(parent, path, visited)
        visited[node] = above
        return above

    def edges(self) -> List[Tuple[str, str]]:
        """所有边 (父节点名, 子节点名)，按属性ID排序"""
        return [
            (parent.name, child.name)
            for parent in self.get_nodes()
            for child in parent.sorted_children()
        ]

    def num_edges(self) -> int:
        return sum(len(node.children) for node in self.nodes.values())

    # ------------------------------------------------------------------
    # 推断入口
    # ------------------------------------------------------------------

    def query_joint_probability(self, query) -> float:
        """联合概率查询，见 EnumerationInference.query_joint_probability"""
        return EnumerationInference(self).query_joint_probability(query)

    def query_conditional_probability(self, query) -> float:
        """条件概率查询，见 EnumerationInference.query_conditional_probability"""
        return EnumerationInference(self).query_conditional_probability(query)

    def query_distribution(self, attribute: Attribute, condition=None) -> Dict[str, float]:
        """单变量后验分布，见 EnumerationInference.query_distribution"""
        return EnumerationInference(self).query_distribution(attribute, condition)

    # ------------------------------------------------------------------
    # 导出
    # ------------------------------------------------------------------

    def to_networkx(self) -> nx.DiGraph:
        """转换为以属性名为节点的 networkx 有向图"""
        graph = nx.DiGraph()
        graph.add_nodes_from(node.name for node in self.get_nodes())
        graph.add_edges_from(self.edges())
        return graph

    def is_acyclic(self) -> bool:
        """检查是否为有向无环图"""
        return nx.is_directed_acyclic_graph(self.to_networkx())

    def get_topological_order(self) -> List[str]:
        """获取拓扑排序（同层按属性ID）"""
        graph = self.to_networkx()
        if not nx.is_directed_acyclic_graph(graph):
            raise InvalidStructureError("图中存在环，无法进行拓扑排序")
        order = {node.name: node.attribute.id for node in self.get_nodes()}
        return list(nx.lexicographical_topological_sort(graph, key=order.get))

    def export_structure(self) -> Dict:
        """
        导出网络结构

        Returns:
            结构字典
        """
        acyclic = self.is_acyclic()
        return {
            'nodes': [node.name for node in self.get_nodes()],
            'edges': [list(edge) for edge in self.edges()],
            'parents': {
                node.name: [p.name for p in node.sorted_parents()]
                for node in self.get_nodes()
            },
            'is_acyclic': acyclic,
            'topological_order': self.get_topological_order() if acyclic else None
        }

    def to_string(self, verbose: bool = False) -> str:
        """
        每个节点一行: 节点名 父节点1 父节点2 ...

        Args:
            verbose: 是否附带条件概率表
        """
        lines = []
        for node in self.get_nodes():
            lines.append(" ".join([node.name] + [p.name for p in node.sorted_parents()]))
            if verbose:
                lines.append(str(node.cpd))
                lines.append("")
        return "\n".join(lines)

    def __str__(self):
        return self.to_string()
