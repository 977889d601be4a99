#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
主执行脚本 - Pipeline调度器
协调 数据加载 -> 结构搜索 -> 推断查询 -> 结果输出 的流程
"""
import argparse
import os
import sys
import time
from typing import Dict, List, Optional

from bayesclimb.data_loader import DataSet
from bayesclimb.bayes import (
    ConditionalQuery,
    DegenerateConditioningError,
    HillClimbingSearch,
    JointQuery,
    MaxIterations,
    MinScoreDelta,
    NoImprovement,
    get_builder,
    get_scoring_function,
)
from bayesclimb.utils.config import load_config, ensure_dir
from bayesclimb.utils.io import save_metadata
from bayesclimb.utils.logging import setup_logger, set_level

logger = setup_logger("main")


def build_stopping_criterion(search_config: Dict):
    """
    根据配置创建停止条件

    Args:
        search_config: 配置中的 search 部分

    Returns:
        StoppingCriterion实例
    """
    stopping = search_config.get('stopping', 'no_improvement')
    if stopping == 'no_improvement':
        return NoImprovement()
    elif stopping == 'max_iterations':
        return MaxIterations(int(search_config['max_iterations']))
    elif stopping == 'min_delta':
        return MinScoreDelta(float(search_config['min_delta']))
    else:
        raise ValueError(f"未知的停止条件: {stopping}")


def build_search_from_config(config: Dict) -> HillClimbingSearch:
    """
    根据配置组装爬山搜索

    Args:
        config: 完整配置字典

    Returns:
        HillClimbingSearch实例
    """
    network_config = config['network']
    search_config = config['search']

    smoothing = network_config['smoothing']
    if smoothing < 0:
        raise ValueError(f"平滑计数不能为负: {smoothing}")

    return HillClimbingSearch(
        scoring_function=get_scoring_function(search_config['scoring']),
        smoothing=smoothing,
        stopping_criterion=build_stopping_criterion(search_config),
        seed_builder=get_builder(network_config['seed'], network_config.get('class_attribute')),
        show_progress=bool(search_config.get('show_progress', False))
    )


def parse_assignments(items: Optional[List[str]]) -> Dict[str, str]:
    """
    解析命令行中的 NAME=VALUE 列表

    Args:
        items: 形如 ["A=1", "B=yes"] 的列表

    Returns:
        属性名 -> 取值名
    """
    assignments = {}
    for item in items or []:
        if '=' not in item:
            raise ValueError(f"查询格式应为 NAME=VALUE: {item}")
        name, value = item.split('=', 1)
        assignments[name.strip()] = value.strip()
    return assignments


class StructureLearningPipeline:
    """
    结构学习Pipeline

    完整流程：
    1. 数据加载（CSV / Parquet）
    2. 初始网络构造
    3. 爬山法结构搜索
    4. 推断查询与结果汇总
    """

    def __init__(self, config: Dict):
        """
        初始化Pipeline

        Args:
            config: 配置字典（已合并默认值）
        """
        self.config = config
        self.search = build_search_from_config(config)
        self.data = None
        self.network = None
        logger.info("=" * 80)
        logger.info("BayesClimbNet Pipeline 初始化")
        logger.info("=" * 80)

    def run(self, data_path: str) -> Dict:
        """
        运行结构学习

        Args:
            data_path: 数据文件路径

        Returns:
            结果汇总字典
        """
        logger.info("【阶段1】数据加载")
        self.data = DataSet.from_file(data_path, continuous=self.config['data'].get('continuous'))

        logger.info("【阶段2】爬山法结构搜索")
        start_time = time.time()
        self.network = self.search.build_network(self.data)
        runtime = time.time() - start_time

        logger.info(f"学到的网络结构:\n{self.network}")

        return {
            'data_path': data_path,
            'instances': len(self.data),
            'scoring': self.config['search']['scoring'],
            'smoothing': self.config['network']['smoothing'],
            'seed': self.config['network']['seed'],
            'final_score': float(self.search.curr_score),
            'score_history': [float(s) for s in self.search.score_history],
            'iterations': self.search.num_iterations,
            'operations_examined': self.search.num_operations_examined,
            'runtime_seconds': round(runtime, 3),
            'structure': self.network.export_structure()
        }

    def query(self, target: Dict[str, str], condition: Dict[str, str]) -> float:
        """
        在学到的网络上回答条件概率查询

        Args:
            target: 目标变量 属性名 -> 取值名
            condition: 条件变量 属性名 -> 取值名

        Returns:
            P(target | condition)
        """
        if self.network is None:
            raise RuntimeError("请先运行 run() 学习网络结构")

        query = ConditionalQuery(
            JointQuery.from_names(self.data, target),
            JointQuery.from_names(self.data, condition)
        )
        probability = self.network.query_conditional_probability(query)
        logger.info(f"{query} = {probability:.6f}")
        return probability


def main(argv: Optional[List[str]] = None) -> int:
    """命令行入口"""
    parser = argparse.ArgumentParser(description="离散贝叶斯网络爬山法结构学习")
    parser.add_argument('--config', type=str, default=None, help='配置文件路径')
    parser.add_argument('--data', type=str, default=None, help='数据文件路径（覆盖配置）')
    parser.add_argument('--scoring', type=str, default=None, help='评分函数: bic / log_likelihood')
    parser.add_argument('--seed', type=str, default=None, help='初始结构: empty / naive_bayes')
    parser.add_argument('--class-attribute', type=str, default=None, help='朴素贝叶斯类别变量')
    parser.add_argument('--smoothing', type=float, default=None, help='Laplace平滑计数')
    parser.add_argument('--query', action='append', default=None, help='查询目标 NAME=VALUE，可重复')
    parser.add_argument('--given', action='append', default=None, help='查询条件 NAME=VALUE，可重复')
    parser.add_argument('--output', type=str, default=None, help='结果输出目录')

    args = parser.parse_args(argv)

    config = load_config(args.config)
    if args.data:
        config['data']['path'] = args.data
    if args.scoring:
        config['search']['scoring'] = args.scoring
    if args.seed:
        config['network']['seed'] = args.seed
    if args.class_attribute:
        config['network']['class_attribute'] = args.class_attribute
    if args.smoothing is not None:
        config['network']['smoothing'] = args.smoothing
    if args.output:
        config['output']['dir'] = args.output

    set_level(config['logging']['level'])

    if not config['data']['path']:
        parser.error("需要通过 --data 或配置文件指定数据文件")

    try:
        pipeline = StructureLearningPipeline(config)
        results = pipeline.run(config['data']['path'])

        target = parse_assignments(args.query)
        if target:
            condition = parse_assignments(args.given)
            try:
                results['query'] = {
                    'target': target,
                    'condition': condition,
                    'probability': float(pipeline.query(target, condition))
                }
            except DegenerateConditioningError as e:
                logger.warning(f"查询无定义: {e}")
                results['query'] = {'target': target, 'condition': condition, 'probability': None}

        output_dir = config['output']['dir']
        ensure_dir(output_dir)
        summary_path = os.path.join(output_dir, config['output']['summary_file'])
        save_metadata(results, summary_path)
        logger.info(f"结果汇总已保存: {summary_path}")
    except Exception as e:
        logger.error(f"❌ 结构学习失败: {e}")
        logger.exception(e)
        return 1

    logger.info("✅ 结构学习完成")
    return 0


if __name__ == '__main__':
    sys.exit(main())
