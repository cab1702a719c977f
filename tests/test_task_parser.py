"""Tests for the markdown task list parser."""

import logging

from devflow.agents.execution.mocks import MOCK_TASK_LIST
from devflow.agents.prompts import TASK_FORMAT_EXAMPLE
from devflow.agents.task_parser import parse_task_list

CHINESE_TASKS = """\
## P0 核心

### ✅ P0-1: 创建领域模型
**工作量**: 0.5天
**依赖**: 无
**文件**: src/domain/model/
**检查清单**:
- [ ] 创建枚举
- [x] 创建异常

### P0-2: 实现仓储
**依赖**: P0-1，P0-3
**文件**: src/infra/repo.py
- [ ] 实现保存

### 🔄 P0-3：应用服务
**依赖**: P0-1
"""


class TestParseTaskList:
    def test_prompt_example_parses(self):
        tasks = parse_task_list(TASK_FORMAT_EXAMPLE)
        assert [t.id for t in tasks] == ["P0-1", "P0-2"]
        assert tasks[0].title == "Create domain enums and exceptions"
        assert tasks[0].dependencies == ()
        assert tasks[1].dependencies == ("P0-1",)
        assert tasks[1].target_file == "src/domain/repository.py"

    def test_checklist_becomes_description(self):
        tasks = parse_task_list(TASK_FORMAT_EXAMPLE)
        assert tasks[0].description == "- Create the Status enum\n- Create the exception hierarchy"

    def test_mock_task_list_parses(self):
        tasks = parse_task_list(MOCK_TASK_LIST)
        assert [t.id for t in tasks] == ["P0-1", "P0-2"]

    def test_chinese_markers_and_emoji(self):
        tasks = parse_task_list(CHINESE_TASKS)
        assert [t.id for t in tasks] == ["P0-1", "P0-2", "P0-3"]
        assert tasks[0].title == "创建领域模型"
        assert tasks[0].dependencies == ()
        assert tasks[0].target_file == "src/domain/model/"
        assert tasks[0].description == "- 创建枚举\n- 创建异常"
        assert tasks[1].dependencies == ("P0-1", "P0-3")
        assert tasks[2].title == "应用服务"

    def test_headings_without_id_are_ignored(self):
        tasks = parse_task_list("### Overview\nSome text\n### P1-1: Real task\n")
        assert [t.id for t in tasks] == ["P1-1"]

    def test_missing_title_falls_back_to_id(self):
        tasks = parse_task_list("### P2-4\n")
        assert tasks[0].title == "P2-4"

    def test_empty_input(self, caplog):
        with caplog.at_level(logging.WARNING, logger="devflow.agents.task_parser"):
            assert parse_task_list("") == []
            assert parse_task_list(None) == []
        assert "empty" in caplog.text

    def test_unknown_dependency_logged(self, caplog):
        md = "### P0-1: A\n**Depends**: P9-9\n"
        with caplog.at_level(logging.WARNING, logger="devflow.agents.task_parser"):
            tasks = parse_task_list(md)
        assert tasks[0].dependencies == ("P9-9",)
        assert "P9-9" in caplog.text
