"""Shared fixtures for wiki event schedule tests."""
from datetime import datetime, timezone

import pytest
from bs4 import BeautifulSoup

from processor.version_timeline import VersionTimelineBuilder


VERSIONS_HTML = """
<html>
    <body>
        <table class="wikitable">
            <tbody>
                <tr><th>角色</th><th>光锥</th><th>活动</th></tr>
                <tr><th>希儿</th><td>于夜色中</td><td>星芒战幕</td></tr>
            </tbody>
        </table>
        <table class="wikitable">
            <tbody>
                <tr>
                    <th>版本</th><th>更新时间</th><th>版本名称</th><th>角色</th><th>光锥</th>
                    <th>地图</th><th>活动</th><th>剧情</th><th>系统</th><th>其他</th>
                </tr>
                <tr>
                    <th>1.0
</th>
                    <td>2023/04/26
</td>
                    <td>通往群星的轨道</td><td></td><td></td><td></td><td></td><td></td><td></td><td></td>
                </tr>
                <tr>
                    <th>3.2
</th>
                    <td>2024/02/01
</td>
                    <td>走过安眠地的花丛</td><td></td><td></td><td></td><td></td><td></td><td></td><td></td>
                </tr>
                <tr>
                    <th>3.3</th>
                    <td>2024-03-14 12:00</td>
                    <td>在第八日启程</td><td></td><td></td><td></td><td></td><td></td><td></td><td></td>
                </tr>
            </tbody>
        </table>
    </body>
</html>
"""

EVENTS_HTML = """
<html>
    <body>
        <table id="CardSelectTr">
            <tbody>
                <tr><th>时间</th><th>图片</th><th>名称</th></tr>
                <tr data-param1="版本活动, 限时活动">
                    <td>3.2版本更新后~3.2版本结束
</td>
                    <td><img src="a.png"/></td>
                    <td>花藏繁生
</td>
                </tr>
                <tr data-param1="特殊活动">
                    <td>3.2版本更新后~3.3版本结束</td>
                    <td></td>
                    <td>模拟宇宙</td>
                </tr>
                <tr data-param1="限时活动">
                    <td>2024/02/10 12:00~3.9版本结束前</td>
                    <td></td>
                    <td>星芒战幕</td>
                </tr>
                <tr data-param1="版本活动, 永久活动">
                    <td>正式开服后~1.0版本结束</td>
                    <td></td>
                    <td>忘却之庭</td>
                </tr>
                <tr data-param1="限时活动">
                    <td>正式开服后~1.0版本结束</td>
                    <td></td>
                    <td>开拓之旅</td>
                </tr>
            </tbody>
        </table>
    </body>
</html>
"""

FIXED_NOW = datetime(2024, 10, 19, 12, 0, tzinfo=timezone.utc)


@pytest.fixture
def versions_document():
    """Parsed version history page."""
    return BeautifulSoup(VERSIONS_HTML, 'html.parser')


@pytest.fixture
def events_document():
    """Parsed event schedule page."""
    return BeautifulSoup(EVENTS_HTML, 'html.parser')


@pytest.fixture
def timeline(versions_document):
    """Version timeline built from the sample version history page."""
    return VersionTimelineBuilder().build(versions_document)


@pytest.fixture
def fixed_clock():
    """Clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW
