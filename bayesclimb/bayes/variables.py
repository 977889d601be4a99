#!/usr/bin/env python
# -*- coding: utf-8 -*-
"""
贝叶斯网络变量定义
定义随机变量（属性）及其取值空间
"""
from enum import Enum
from typing import Dict, Iterable, Tuple
from dataclasses import dataclass, field


class AttributeType(Enum):
    """属性类型"""
    NOMINAL = 'nominal'
    CONTINUOUS = 'continuous'


@dataclass(frozen=True)
class Attribute:
    """
    贝叶斯网络随机变量
    
    取值编码即取值名在 values 中的下标，构造后不可变。
    
    Attributes:
        name: 变量名
        id: 唯一整数ID（数据列序号）
        type: 变量类型（NOMINAL / CONTINUOUS）
        values: 离散取值名（有序），连续变量为空
    """
    name: str
    id: int
    type: AttributeType = AttributeType.NOMINAL
    values: Tuple[str, ...] = field(default=())

    def __post_init__(self):
        if self.type is AttributeType.NOMINAL and not self.values:
            raise ValueError(f"离散属性 {self.name} 至少需要一个取值")
        if self.type is AttributeType.CONTINUOUS and self.values:
            raise ValueError(f"连续属性 {self.name} 不应定义取值")
        # 允许传入 list，统一转换为字符串 tuple 以保持可哈希
        values = tuple(str(v) for v in self.values)
        if len(set(values)) != len(values):
            raise ValueError(f"属性 {self.name} 的取值存在重复: {values}")
        object.__setattr__(self, 'values', values)

    @classmethod
    def nominal(cls, name: str, id: int, values: Iterable) -> 'Attribute':
        """创建离散属性"""
        return cls(name=name, id=id, type=AttributeType.NOMINAL, values=tuple(values))

    @classmethod
    def continuous(cls, name: str, id: int) -> 'Attribute':
        """创建连续属性"""
        return cls(name=name, id=id, type=AttributeType.CONTINUOUS)

    @property
    def is_nominal(self) -> bool:
        return self.type is AttributeType.NOMINAL

    @property
    def cardinality(self) -> int:
        """取值个数（连续变量为0）"""
        return len(self.values)

    @property
    def value_map(self) -> Dict[str, int]:
        """取值名 -> 取值编码"""
        return {value: code for code, value in enumerate(self.values)}

    def value_codes(self) -> range:
        """所有取值编码"""
        return range(len(self.values))

    def is_valid_value_id(self, code: int) -> bool:
        return self.is_nominal and 0 <= code < len(self.values)

    def value_name(self, code: int) -> str:
        """
        根据取值编码获取取值名
        
        Args:
            code: 取值编码
            
        Returns:
            取值名
        """
        if not self.is_valid_value_id(code):
            raise ValueError(f"{code} 不是属性 {self.name} 的合法取值编码")
        return self.values[code]

    def value_id(self, name) -> int:
        """
        根据取值名获取取值编码
        
        Args:
            name: 取值名
            
        Returns:
            取值编码
        """
        if not self.is_nominal:
            raise ValueError(f"连续属性 {self.name} 没有离散取值")
        try:
            return self.values.index(str(name))
        except ValueError:
            raise ValueError(f"{name} 不是属性 {self.name} 的合法取值，可选: {list(self.values)}") from None

    def __str__(self):
        return self.name
