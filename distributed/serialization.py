"""
PRIDE cloud serialization helpers
G1 points travel as [x, y] affine coordinates; they are written as decimal
strings so that 254-bit integers survive JSON parsers limited to doubles
"""

from typing import Any, Dict, List

from cloud_session import Session
from pride_group import GroupElement


def serialize_point(elem: GroupElement) -> List[str]:
    """序列化G1元素为 [x, y] 十进制字符串，单位元为 ["0", "0"]"""
    x, y = elem.to_xy()
    return [str(x), str(y)]


def serialize_session_summary(session: Session) -> Dict[str, Any]:
    """会话摘要（不包含聚合值，否则任何人都能伪造证明）"""
    with session.lock:
        return {
            'started': session.started,
            'commitments': len(session.commitments),
        }
