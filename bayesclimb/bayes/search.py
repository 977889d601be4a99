#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
爬山法结构搜索
每轮考虑当前网络上所有合法的结构操作:

1. 添加边
2. 删除边
3. 反转边

对每个候选操作在同一个网络上执行 -> 评分 -> 撤销，选分数最小者提交，
直到停止条件满足。
"""
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional

from tqdm import tqdm

from bayesclimb.bayes.builders import EmptyNetworkBuilder, NetworkBuilder
from bayesclimb.bayes.scoring import ScoringFunction
from bayesclimb.bayes.structure import BayesianNetwork, Node
from bayesclimb.utils.logging import setup_logger

logger = setup_logger("hill_climbing")


class OperationType(Enum):
    """结构操作类型"""
    ADD = 'add'
    REMOVE = 'remove'
    REVERSE = 'reverse'


@dataclass(frozen=True, eq=False)
class Operation:
    """
    对有序节点对 (parent, child) 的一次结构操作，本身不包含修改逻辑

    Attributes:
        type: 操作类型
        parent: 父节点
        child: 子节点
    """
    type: OperationType
    parent: Node
    child: Node

    def inverse(self) -> 'Operation':
        """
        撤销本操作的逆操作

        添加边的逆是删除同一条边，删除边的逆是重新添加，
        反转边 parent -> child 的逆是反转 child -> parent。
        """
        if self.type is OperationType.ADD:
            return Operation(OperationType.REMOVE, self.parent, self.child)
        elif self.type is OperationType.REMOVE:
            return Operation(OperationType.ADD, self.parent, self.child)
        else:
            return Operation(OperationType.REVERSE, self.child, self.parent)

    def __eq__(self, other):
        if not isinstance(other, Operation):
            return NotImplemented
        return (self.type, self.parent, self.child) == (other.type, other.parent, other.child)

    def __hash__(self):
        return hash((self.type, self.parent, self.child))

    def __str__(self):
        return f"{self.type.name} {self.parent.name} -> {self.child.name}"


class StoppingCriterion:
    """
    停止条件: 本轮最优分数没有改进（默认）

    子类可在此基础上追加其他条件。
    """

    name = 'no_improvement'

    def is_met(self, search: 'HillClimbingSearch') -> bool:
        return search.converged

    def __repr__(self):
        return f"{type(self).__name__}()"


NoImprovement = StoppingCriterion


class MaxIterations(StoppingCriterion):
    """无改进，或迭代次数达到上限"""

    name = 'max_iterations'

    def __init__(self, max_iterations: int):
        if max_iterations < 1:
            raise ValueError(f"最大迭代次数必须为正: {max_iterations}")
        self.max_iterations = max_iterations

    def is_met(self, search: 'HillClimbingSearch') -> bool:
        return search.converged or search.num_iterations >= self.max_iterations

    def __repr__(self):
        return f"MaxIterations({self.max_iterations})"


class MinScoreDelta(StoppingCriterion):
    """无改进，或最近一次提交带来的分数下降小于阈值"""

    name = 'min_delta'

    def __init__(self, min_delta: float):
        if min_delta < 0:
            raise ValueError(f"最小分数改进不能为负: {min_delta}")
        self.min_delta = min_delta

    def is_met(self, search: 'HillClimbingSearch') -> bool:
        if search.converged:
            return True
        history = search.score_history
        return len(history) >= 2 and history[-2] - history[-1] < self.min_delta

    def __repr__(self):
        return f"MinScoreDelta({self.min_delta})"


class HillClimbingSearch:
    """
    爬山法结构学习

    整个搜索过程只存在一个网络实例，候选操作串行地执行、评分、撤销。
    num_iterations / num_operations_examined 只用于观察，不影响控制流程。
    """

    def __init__(
        self,
        scoring_function: ScoringFunction,
        smoothing: float = 1,
        stopping_criterion: Optional[StoppingCriterion] = None,
        seed_builder: Optional[NetworkBuilder] = None,
        show_progress: bool = False
    ):
        """
        初始化搜索

        Args:
            scoring_function: 评分函数（越小越好）
            smoothing: 重新计算CPD时使用的Laplace平滑计数
            stopping_criterion: 停止条件，None表示无改进即停止
            seed_builder: 初始网络构造器，None表示无边网络
            show_progress: 是否显示候选操作评分进度条
        """
        self.scoring_function = scoring_function
        self.smoothing = smoothing
        self.stopping_criterion = stopping_criterion or NoImprovement()
        self.seed_builder = seed_builder or EmptyNetworkBuilder()
        self.show_progress = show_progress

        self.net: Optional[BayesianNetwork] = None
        self.data = None
        self.curr_score: Optional[float] = None
        self.score_history: List[float] = []
        self.converged = False

        self.num_iterations = 0
        self.num_operations_examined = 0

    def build_network(self, data) -> BayesianNetwork:
        """
        从初始网络开始搜索直到停止条件满足

        Args:
            data: DataSet对象

        Returns:
            学到的网络
        """
        self.start(self.seed_builder.build(data, self.smoothing), data)

        while not self.stopping_criterion.is_met(self):
            logger.debug(f"当前网络:\n{self.net}")
            self.run_iteration()

        logger.info(
            f"搜索结束: 迭代 {self.num_iterations} 次, 考察操作 {self.num_operations_examined} 个, "
            f"最终分数 {self.curr_score:.4f}, 共 {self.net.num_edges()} 条边"
        )
        return self.net

    def start(self, network: BayesianNetwork, data) -> None:
        """
        以给定网络为起点重置搜索状态

        Args:
            network: 初始网络（CPD已学习）
            data: DataSet对象
        """
        self.net = network
        self.data = data
        self.converged = False
        self.num_iterations = 0
        self.num_operations_examined = 0
        self.curr_score = self.scoring_function.score_net(network, data)
        self.score_history = [self.curr_score]
        logger.info(f"开始爬山搜索，评分函数: {self.scoring_function!r}, 初始分数 {self.curr_score:.4f}")

    def run_iteration(self) -> Optional[Operation]:
        """
        执行一轮搜索

        Returns:
            本轮提交的操作；没有改进时返回 None 并标记为已收敛
        """
        if self.net is None:
            raise RuntimeError("搜索尚未开始，请先调用 start() 或 build_network()")

        self.num_iterations += 1

        operations = self.get_valid_operations(self.net.get_nodes())

        scores = []
        for operation in tqdm(operations, desc=f"第{self.num_iterations}轮候选操作",
                              disable=not self.show_progress, leave=False):
            score = self.score_operation(operation)
            logger.debug(f"操作 ({operation}) 的分数 = {score:.4f}")
            scores.append(score)

        # 分数最小者胜出，并列时取先枚举到的
        best_operation, best_score = None, None
        for operation, score in zip(operations, scores):
            if best_score is None or score < best_score:
                best_operation, best_score = operation, score

        if best_operation is None or not best_score < self.curr_score:
            self.converged = True
            logger.info(f"第 {self.num_iterations} 轮无改进，搜索收敛，分数 {self.curr_score:.4f}")
            return None

        self.execute_operation(best_operation)
        logger.info(
            f"第 {self.num_iterations} 轮执行操作: {best_operation}, "
            f"分数 {self.curr_score:.4f} -> {best_score:.4f}"
        )
        self.curr_score = best_score
        self.score_history.append(best_score)
        return best_operation

    def score_operation(self, operation: Operation) -> float:
        """
        计算执行某个操作后的网络分数（执行 -> 评分 -> 撤销）

        Args:
            operation: 候选操作

        Returns:
            分数
        """
        self.execute_operation(operation)
        try:
            return self.scoring_function.score_net(self.net, self.data)
        finally:
            self.undo_operation(operation)

    def execute_operation(self, operation: Operation) -> None:
        """
        在网络上执行操作（操作已经过合法性检查）

        Args:
            operation: 要执行的操作
        """
        parent, child = operation.parent, operation.child
        if operation.type is OperationType.ADD:
            self.net.create_edge(parent, child, self.data, self.smoothing, validate=False)
        elif operation.type is OperationType.REMOVE:
            self.net.remove_edge(parent, child, self.data, self.smoothing)
        else:
            self.net.reverse_edge(parent, child, self.data, self.smoothing, validate=False)

    def undo_operation(self, operation: Operation) -> None:
        """
        撤销操作: 添加 -> 删除，删除 -> 添加，反转 -> 反向再反转

        Args:
            operation: 要撤销的操作
        """
        self.execute_operation(operation.inverse())

    def get_valid_operations(self, nodes: List[Node]) -> List[Operation]:
        """
        枚举当前网络上所有合法的操作

        外层遍历父节点、内层遍历子节点（均按属性ID）；
        同一节点对内按 添加、反转、删除 的顺序给出。

        Args:
            nodes: 参与搜索的节点

        Returns:
            合法操作列表
        """
        operations = []
        for parent in nodes:
            for child in nodes:
                if parent is not child:
                    operations.extend(self.get_operations_on_edge(parent, child))

        self.num_operations_examined += len(operations)
        return operations

    def get_operations_on_edge(self, parent: Node, child: Node) -> List[Operation]:
        """
        有序节点对 (parent, child) 上的合法操作

        Args:
            parent: 父节点候选
            child: 子节点候选

        Returns:
            合法操作列表
        """
        operations = []

        exists = self.net.does_edge_exist(parent, child)

        # 边不存在且添加后无环
        if not exists and self.net.is_valid_edge(parent, child):
            operations.append(Operation(OperationType.ADD, parent, child))

        if exists:
            # 反转后无环
            if self.net.is_valid_reverse_edge(parent, child):
                operations.append(Operation(OperationType.REVERSE, parent, child))
            operations.append(Operation(OperationType.REMOVE, parent, child))

        return operations
