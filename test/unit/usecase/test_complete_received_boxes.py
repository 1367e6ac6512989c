"""CompleteReceivedBoxes 유스케이스 단위 테스트."""

from unittest.mock import MagicMock

import pytest

from heblo_warehouse.domain.entities.stock_up_operation import (
    make_document_number,
)
from heblo_warehouse.domain.enums import StockUpSourceType, TransportBoxState
from heblo_warehouse.usecase.complete_received_boxes import (
    CompleteReceivedBoxes,
    SYSTEM_USER,
    TRANSPORT_DATA_SOURCE,
)

S = TransportBoxState


@pytest.fixture
def event_publisher():
    return MagicMock()


@pytest.fixture
def merge_scheduler():
    return MagicMock()


@pytest.fixture
def job(repository, stock_up_gateway, event_publisher, merge_scheduler, now):
    return CompleteReceivedBoxes(
        repository,
        stock_up_gateway,
        event_publisher,
        merge_scheduler=merge_scheduler,
        clock=lambda: now,
    )


def _add_operation(gateway, box_id, product_code, finish=None):
    operation = gateway.create_operation(
        make_document_number(box_id, product_code),
        product_code,
        1,
        StockUpSourceType.TRANSPORT_BOX,
        box_id,
    )
    if finish == 'completed':
        operation.submit()
        operation.complete()
    elif finish == 'failed':
        operation.submit()
        operation.fail('rejected')
    return operation


class TestCompleted:
    def test_all_completed_moves_to_stocked(
        self, job, repository, stock_up_gateway, box_factory,
        event_publisher, merge_scheduler,
    ):
        repository.add(box_factory(S.RECEIVED, box_id=1))
        _add_operation(stock_up_gateway, 1, 'AKL001', 'completed')
        _add_operation(stock_up_gateway, 1, 'AKL002', 'completed')

        result = job.execute()

        assert result.completed == 1
        assert result.failed == 0
        box = repository.get_by_id(1)
        assert box.state == S.STOCKED
        assert box.state_log[-1].user_name == SYSTEM_USER

        event = event_publisher.publish.call_args[0][0]
        assert event.previous_state == S.RECEIVED
        assert event.new_state == S.STOCKED
        merge_scheduler.schedule_merge.assert_called_once_with(
            TRANSPORT_DATA_SOURCE
        )


class TestFailed:
    def test_failed_operation_moves_to_error(
        self, job, repository, stock_up_gateway, box_factory
    ):
        repository.add(box_factory(S.RECEIVED, box_id=3, code='B003'))
        _add_operation(stock_up_gateway, 3, 'AKL001', 'completed')
        _add_operation(stock_up_gateway, 3, 'AKL002', 'failed')

        result = job.execute()

        assert result.failed == 1
        assert result.failed_box_codes == ['B003']
        box = repository.get_by_id(3)
        assert box.state == S.ERROR
        assert box.description == (
            '1 stock-up operation(s) failed. '
            'Document numbers: BOX-000003-AKL002'
        )

    def test_no_operations_moves_to_error(
        self, job, repository, box_factory, merge_scheduler
    ):
        repository.add(box_factory(S.RECEIVED))

        result = job.execute()

        assert result.failed == 1
        box = repository.get_by_id(1)
        assert box.state == S.ERROR
        assert box.state_log[-1].description == (
            'No stock-up operations found for this box'
        )
        merge_scheduler.schedule_merge.assert_called_once()

    def test_unexpected_error_does_not_stop_batch(
        self, repository, box_factory, event_publisher, now
    ):
        repository.add(box_factory(S.RECEIVED, box_id=1, code='B001'))
        repository.add(box_factory(S.RECEIVED, box_id=2, code='B002'))
        gateway = MagicMock()
        gateway.get_operations_by_source.side_effect = [
            RuntimeError('db down'), [],
        ]
        job = CompleteReceivedBoxes(
            repository, gateway, event_publisher, clock=lambda: now,
        )

        result = job.execute()

        assert result.failed == 2
        assert repository.get_by_id(1).state == S.RECEIVED
        assert repository.get_by_id(2).state == S.ERROR


class TestSkipped:
    def test_pending_operations_skip_box(
        self, job, repository, stock_up_gateway, box_factory,
        event_publisher, merge_scheduler,
    ):
        repository.add(box_factory(S.RECEIVED))
        _add_operation(stock_up_gateway, 1, 'AKL001', 'completed')
        _add_operation(stock_up_gateway, 1, 'AKL002')

        result = job.execute()

        assert result.skipped == 1
        assert repository.get_by_id(1).state == S.RECEIVED
        event_publisher.publish.assert_not_called()
        merge_scheduler.schedule_merge.assert_not_called()

    def test_only_received_boxes_are_processed(
        self, job, repository, box_factory
    ):
        repository.add(box_factory(S.IN_TRANSIT))

        result = job.execute()

        assert (result.completed, result.failed, result.skipped) == (0, 0, 0)
        assert repository.get_by_id(1).state == S.IN_TRANSIT


class TestDisabled:
    def test_disabled_job_does_nothing(self, stock_up_gateway):
        repository = MagicMock()
        job = CompleteReceivedBoxes(
            repository, stock_up_gateway, MagicMock(), enabled=False,
        )

        result = job.execute()

        assert result.completed == 0
        repository.list_by_state.assert_not_called()
