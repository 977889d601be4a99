#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
快速入门示例
在合成数据上演示结构学习与概率查询
"""
import numpy as np
import pandas as pd

from bayesclimb.bayes import (
    BICScore,
    ConditionalQuery,
    HillClimbingSearch,
    JointQuery,
)
from bayesclimb.data_loader import DataSet


def make_sprinkler_data(n: int = 500, random_state: int = 42) -> pd.DataFrame:
    """
    生成经典的 多云 -> 洒水/下雨 -> 草湿 数据

    Args:
        n: 样本数
        random_state: 随机种子
    """
    rng = np.random.RandomState(random_state)
    cloudy = rng.rand(n) < 0.5
    sprinkler = np.where(cloudy, rng.rand(n) < 0.1, rng.rand(n) < 0.5)
    rain = np.where(cloudy, rng.rand(n) < 0.8, rng.rand(n) < 0.2)
    wet = np.where(sprinkler | rain, rng.rand(n) < 0.9, rng.rand(n) < 0.05)

    to_text = lambda flags: np.where(flags, 'yes', 'no')
    return pd.DataFrame({
        'Cloudy': to_text(cloudy),
        'Sprinkler': to_text(sprinkler),
        'Rain': to_text(rain),
        'WetGrass': to_text(wet)
    })


def main():
    data = DataSet.from_dataframe(make_sprinkler_data())

    print(f"\n{'='*80}")
    print("爬山法结构学习")
    print(f"{'='*80}")
    search = HillClimbingSearch(BICScore(), smoothing=1)
    network = search.build_network(data)

    print(f"\n学到的结构（节点 父节点...）:\n{network}")
    print(f"\n迭代次数: {search.num_iterations}")
    print(f"考察操作数: {search.num_operations_examined}")
    print(f"最终BIC: {search.curr_score:.4f}")

    print(f"\n{'='*80}")
    print("概率查询")
    print(f"{'='*80}")
    rain_given_wet = ConditionalQuery(
        JointQuery.from_names(data, {'Rain': 'yes'}),
        JointQuery.from_names(data, {'WetGrass': 'yes'})
    )
    print(f"{rain_given_wet} = {network.query_conditional_probability(rain_given_wet):.4f}")

    wet = data.attribute_by_name('WetGrass')
    print(f"P(WetGrass) = {network.query_distribution(wet)}")


if __name__ == '__main__':
    main()
