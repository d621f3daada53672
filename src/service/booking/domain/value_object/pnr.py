import uuid_utils


PNR_LENGTH = 8


def generate_pnr() -> str:
    """
    Passenger name record: 8 upper-case hex characters taken from a random UUID.

    Not guaranteed unique; the booking table's unique constraint is the arbiter.
    """
    return str(uuid_utils.uuid4()).replace('-', '')[:PNR_LENGTH].upper()
