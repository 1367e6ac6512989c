"""Heblo 창고 도메인 열거형 정의."""

from enum import StrEnum


class TransportBoxState(StrEnum):
    """운송 박스 생명주기 상태."""

    NEW = 'New'
    OPENED = 'Opened'
    IN_TRANSIT = 'InTransit'
    RECEIVED = 'Received'
    STOCKED = 'Stocked'
    CLOSED = 'Closed'
    ERROR = 'Error'
    RESERVE = 'Reserve'


class TransitionType(StrEnum):
    """상태 전이 분류.

    NEXT/PREVIOUS는 정방향/역방향 흐름, EDGE_CASE는 예외적/관리용 전이다.
    """

    NEXT = 'Next'
    PREVIOUS = 'Previous'
    EDGE_CASE = 'EdgeCase'


class TransportBoxLocation(StrEnum):
    """예비(Reserve) 박스 보관 위치."""

    KUMBAL = 'Kumbal'
    RELAX = 'Relax'
    SKLAD_SKLAD = 'SkladSklad'

    @classmethod
    def _missing_(cls, value):
        # 대소문자 무시 조회
        if isinstance(value, str):
            wanted = value.strip().lower()
            for member in cls:
                if member.value.lower() == wanted:
                    return member
        return None


class StockUpOperationState(StrEnum):
    """입고(stock-up) 작업 상태."""

    PENDING = 'Pending'
    SUBMITTED = 'Submitted'
    COMPLETED = 'Completed'
    FAILED = 'Failed'


class StockUpSourceType(StrEnum):
    """입고 작업 발생 원천."""

    TRANSPORT_BOX = 'TransportBox'
    GIFT_PACKAGE_MANUFACTURE = 'GiftPackageManufacture'
