#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
贝叶斯网络模块
包含变量定义、DAG结构、CPD学习、枚举推断与爬山法结构搜索
"""
from bayesclimb.bayes.variables import Attribute, AttributeType
from bayesclimb.bayes.errors import (
    BayesNetError,
    UnknownAttributeError,
    EdgeNotFoundError,
    InvalidStructureError,
    UnsupportedAttributeTypeError,
    DegenerateConditioningError
)
from bayesclimb.bayes.cpds import ConditionalDistribution
from bayesclimb.bayes.inference import JointQuery, ConditionalQuery, EnumerationInference
from bayesclimb.bayes.structure import Node, BayesianNetwork
from bayesclimb.bayes.scoring import (
    ScoringFunction,
    LogLikelihoodScore,
    BICScore,
    get_scoring_function
)
from bayesclimb.bayes.builders import (
    NetworkBuilder,
    EmptyNetworkBuilder,
    NaiveBayesBuilder,
    get_builder
)
from bayesclimb.bayes.search import (
    Operation,
    OperationType,
    StoppingCriterion,
    NoImprovement,
    MaxIterations,
    MinScoreDelta,
    HillClimbingSearch
)

__all__ = [
    'Attribute',
    'AttributeType',
    'BayesNetError',
    'UnknownAttributeError',
    'EdgeNotFoundError',
    'InvalidStructureError',
    'UnsupportedAttributeTypeError',
    'DegenerateConditioningError',
    'ConditionalDistribution',
    'JointQuery',
    'ConditionalQuery',
    'EnumerationInference',
    'Node',
    'BayesianNetwork',
    'ScoringFunction',
    'LogLikelihoodScore',
    'BICScore',
    'get_scoring_function',
    'NetworkBuilder',
    'EmptyNetworkBuilder',
    'NaiveBayesBuilder',
    'get_builder',
    'Operation',
    'OperationType',
    'StoppingCriterion',
    'NoImprovement',
    'MaxIterations',
    'MinScoreDelta',
    'HillClimbingSearch'
]
