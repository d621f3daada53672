import pytest

from src.service.booking.driving_adapter.http_controller.schema.booking_schema import (
    BookingCreateRequest,
)


@pytest.mark.unit
class TestBookingCreateRequest:
    def test_reads_camel_case_and_field_names(self):
        by_alias = BookingCreateRequest.model_validate(
            {'flightId': 2, 'userEmail': 'alice@example.com', 'numSeats': 1}
        )
        by_name = BookingCreateRequest.model_validate(
            {'flight_id': 2, 'user_email': 'alice@example.com', 'num_seats': 1}
        )

        assert by_alias == by_name
        assert by_alias.flight_id == 2

    def test_schema_keeps_camel_case_example(self):
        schema = BookingCreateRequest.model_json_schema(by_alias=True)

        assert 'flightId' in schema['properties']
        assert schema['example']['numSeats'] == 2
