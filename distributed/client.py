"""
PRIDE Cloud客户端库
封装HTTP调用，供车辆端使用
"""

import itertools
from typing import Any, Dict, Sequence

import requests

from distributed.config import config
from distributed.serialization import serialize_point
from pride_group import GroupElement


def _wire_point(point) -> Sequence:
    if isinstance(point, GroupElement):
        return serialize_point(point)
    return list(point)


class CloudClient:
    """Cloud客户端"""

    def __init__(self, base_url: str = None, car_id: int = None):
        self.base_url = base_url or config.cloud_url
        self.car_id = car_id
        self._rpc_ids = itertools.count(1)

    def _car(self, car_id):
        return self.car_id if car_id is None else car_id

    def health(self) -> dict:
        """健康检查"""
        resp = requests.get(f"{self.base_url}/health")
        resp.raise_for_status()
        return resp.json()

    def time(self) -> int:
        """获取服务器时间"""
        resp = requests.get(f"{self.base_url}/time")
        resp.raise_for_status()
        return resp.json()['timestamp']

    def new_session(self, car_id: int = None) -> dict:
        """开启会话"""
        resp = requests.post(f"{self.base_url}/new_session", json={'car_id': self._car(car_id)})
        resp.raise_for_status()
        return resp.json()

    def commit(self, timestamp: int, tilde_v, tilde_a, car_id: int = None) -> dict:
        """提交承诺；点可以是 GroupElement 或 [x, y]"""
        resp = requests.post(f"{self.base_url}/commit", json={
            'car_id': self._car(car_id),
            'timestamp': timestamp,
            'tilde_v': _wire_point(tilde_v),
            'tilde_a': _wire_point(tilde_a)
        })
        resp.raise_for_status()
        return resp.json()

    def sign(self, pi_v, pi_a, car_id: int = None) -> str:
        """提交聚合值，成功时返回确认字符串"""
        resp = requests.post(f"{self.base_url}/sign", json={
            'car_id': self._car(car_id),
            'pi_v': _wire_point(pi_v),
            'pi_a': _wire_point(pi_a)
        })
        resp.raise_for_status()
        return resp.json()['signature']

    def session(self, car_id: int = None) -> dict:
        """会话摘要"""
        resp = requests.get(f"{self.base_url}/session/{self._car(car_id)}")
        resp.raise_for_status()
        return resp.json()

    def rpc(self, method: str, params: Dict[str, Any] = None) -> dict:
        """调用 JSON-RPC 接口，返回完整响应 {"id", "result", "error"}"""
        resp = requests.post(f"{self.base_url}/rpc", json={
            'jsonrpc': '2.0',
            'method': method,
            'params': [params or {}],
            'id': next(self._rpc_ids)
        })
        resp.raise_for_status()
        return resp.json()
