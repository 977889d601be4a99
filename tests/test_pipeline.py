#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
测试配置加载与命令行Pipeline
"""
import logging
import os
import shutil
import tempfile
from pathlib import Path
import unittest
import pandas as pd
import yaml

from bayesclimb.bayes.builders import NaiveBayesBuilder
from bayesclimb.bayes.scoring import LogLikelihoodScore
from bayesclimb.bayes.search import MaxIterations, NoImprovement
from bayesclimb.main import (
    StructureLearningPipeline,
    build_search_from_config,
    main,
    parse_assignments,
)
from bayesclimb.utils.config import load_config, merge_config
from bayesclimb.utils.io import load_data, save_metadata
from bayesclimb.utils.logging import set_level, setup_logger


class TestConfig(unittest.TestCase):
    """测试配置"""

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def test_default_config(self):
        """默认配置文件"""
        config = load_config()
        self.assertEqual(config['search']['scoring'], 'bic')
        self.assertEqual(config['network']['smoothing'], 1)
        self.assertIsInstance(build_search_from_config(config).stopping_criterion, NoImprovement)

    def test_partial_config_merged_with_defaults(self):
        """部分配置与默认值合并"""
        path = os.path.join(self.tmp_dir, 'custom.yaml')
        with open(path, 'w', encoding='utf-8') as f:
            yaml.safe_dump({'search': {'scoring': 'log_likelihood', 'stopping': 'max_iterations',
                                       'max_iterations': 3},
                            'network': {'seed': 'naive_bayes', 'class_attribute': 'label'}}, f)

        config = load_config(path)
        self.assertEqual(config['output']['dir'], 'outputs')

        search = build_search_from_config(config)
        self.assertIsInstance(search.scoring_function, LogLikelihoodScore)
        self.assertIsInstance(search.stopping_criterion, MaxIterations)
        self.assertEqual(search.stopping_criterion.max_iterations, 3)
        self.assertIsInstance(search.seed_builder, NaiveBayesBuilder)

    def test_invalid_config(self):
        """非法配置项"""
        config = load_config()
        config['search']['stopping'] = 'forever'
        with self.assertRaises(ValueError):
            build_search_from_config(config)

        config = load_config()
        config['network']['seed'] = 'tan'
        with self.assertRaises(ValueError):
            build_search_from_config(config)

    def test_merge_config(self):
        base = {'a': {'b': 1, 'c': 2}, 'd': 3}
        merged = merge_config(base, {'a': {'b': 5}})
        self.assertEqual(merged, {'a': {'b': 5, 'c': 2}, 'd': 3})
        self.assertEqual(base['a']['b'], 1)

    def test_parse_assignments(self):
        self.assertEqual(parse_assignments(['A=1', ' B = yes ']), {'A': '1', 'B': 'yes'})
        self.assertEqual(parse_assignments(None), {})
        with self.assertRaises(ValueError):
            parse_assignments(['A'])


class TestPipeline(unittest.TestCase):
    """测试端到端流程"""

    def setUp(self):
        self.tmp_dir = tempfile.mkdtemp()
        x = [0] * 20 + [1] * 5 + [2] * 5
        self.data_path = os.path.join(self.tmp_dir, 'small.csv')
        pd.DataFrame({'X': x, 'Y': [1 if v == 0 else 0 for v in x]}).to_csv(self.data_path, index=False)

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def test_pipeline_run_and_query(self):
        config = load_config()
        config['search']['scoring'] = 'log_likelihood'
        pipeline = StructureLearningPipeline(config)
        results = pipeline.run(self.data_path)

        self.assertEqual(results['structure']['edges'], [['X', 'Y']])
        self.assertEqual(results['iterations'], 2)
        probability = pipeline.query({'Y': '1'}, {'X': '0'})
        self.assertAlmostEqual(probability, 21 / 22)

    def test_main(self):
        """命令行入口写出结果汇总"""
        output_dir = os.path.join(self.tmp_dir, 'out')
        code = main(['--data', self.data_path, '--scoring', 'log_likelihood',
                     '--output', output_dir, '--query', 'Y=1', '--given', 'X=0'])
        self.assertEqual(code, 0)

        with open(os.path.join(output_dir, 'structure_summary.yaml'), encoding='utf-8') as f:
            summary = yaml.safe_load(f)
        self.assertEqual(summary['structure']['edges'], [['X', 'Y']])
        self.assertAlmostEqual(summary['query']['probability'], 21 / 22)

    def test_main_reports_failure(self):
        """数据文件不存在时返回非零"""
        code = main(['--data', os.path.join(self.tmp_dir, 'missing.csv'),
                     '--output', os.path.join(self.tmp_dir, 'out')])
        self.assertEqual(code, 1)


class TestUtils(unittest.TestCase):
    """测试读写与日志工具"""

    def setUp(self):
        self.tmp_dir = Path(tempfile.mkdtemp())

    def tearDown(self):
        shutil.rmtree(self.tmp_dir)

    def test_load_data_accepts_path(self):
        """Path 与大写扩展名都可读取"""
        path = self.tmp_dir / 'DATA.CSV'
        pd.DataFrame({'A': [0, 1], 'B': ['x', 'y']}).to_csv(path, index=False)
        frame = load_data(path)
        self.assertEqual(list(frame.columns), ['A', 'B'])
        self.assertEqual(len(load_data(str(path))), 2)

    def test_load_data_errors(self):
        with self.assertRaises(ValueError):
            load_data(self.tmp_dir / 'data.xlsx')
        with self.assertRaises(FileNotFoundError):
            load_data(self.tmp_dir / 'missing.csv')

    def test_save_metadata_creates_parent(self):
        """输出目录不存在时自动创建，字段顺序保持不变"""
        path = save_metadata({'b': 1, 'a': [1, 2]}, self.tmp_dir / 'nested' / 'summary.yaml')
        self.assertTrue(path.is_file())
        with open(path, encoding='utf-8') as f:
            self.assertEqual(list(yaml.safe_load(f)), ['b', 'a'])

    def test_setup_logger(self):
        """记录器带前缀，重复获取不会叠加处理器"""
        logger = setup_logger('utils_test', log_dir=str(self.tmp_dir))
        self.assertEqual(logger.name, 'bayesclimb.utils_test')
        self.assertEqual(len(setup_logger('utils_test', log_dir=str(self.tmp_dir)).handlers), 2)
        self.assertTrue((self.tmp_dir / 'utils_test.log').exists())

        set_level('warning')
        self.assertEqual(logger.level, logging.WARNING)
        set_level('INFO')
        with self.assertRaises(ValueError):
            set_level('LOUD')

        for handler in list(logger.handlers):
            handler.close()
            logger.removeHandler(handler)


if __name__ == '__main__':
    unittest.main()
