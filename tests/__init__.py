"""
测试模块

测试结构:
- test_*.py: 单元测试
- integration/: 使用真实文件监听的集成测试
- fixtures.py: 测试用配置模型和观察者

测试覆盖:
- 配置单元的取值、重载、订阅和释放
- 配置源和配置节解析
- 配置注册表
- 文件监听与热重载
- 日志与运行配置
"""

# 导入测试夹具
from .fixtures import *
