#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
输入输出工具
数据文件按扩展名分派读取，结果汇总写为YAML
"""
from pathlib import Path
from typing import Any, Callable, Dict, Union

import pandas as pd
import yaml

PathLike = Union[str, Path]

# 扩展名 -> 读取函数
READERS: Dict[str, Callable[[Path], pd.DataFrame]] = {
    '.csv': lambda path: pd.read_csv(path, encoding='utf-8-sig'),
    '.parquet': pd.read_parquet,
    '.pq': pd.read_parquet,
}


def load_data(file_path: PathLike) -> pd.DataFrame:
    """
    加载表格数据文件

    Args:
        file_path: 文件路径（.csv / .parquet / .pq，扩展名不区分大小写）

    Returns:
        DataFrame
    """
    path = Path(file_path)
    reader = READERS.get(path.suffix.lower())
    if reader is None:
        raise ValueError(f"不支持的文件格式: {path}（可选: {', '.join(sorted(READERS))}）")
    if not path.is_file():
        raise FileNotFoundError(f"数据文件不存在: {path}")
    return reader(path)


def save_metadata(metadata: Dict[str, Any], output_path: PathLike) -> Path:
    """
    把结果汇总写为YAML，保留字段顺序

    Args:
        metadata: 汇总字典
        output_path: 输出路径，父目录不存在时自动创建

    Returns:
        实际写入的路径
    """
    path = Path(output_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        yaml.safe_dump(metadata, f, allow_unicode=True, default_flow_style=False, sort_keys=False)
    return path
