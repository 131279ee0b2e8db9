import logging
from datetime import date

from weekly_rsvp.domain import models as domain
from weekly_rsvp.stores.interfaces import DuplicateRecordError, PersonStore

logger = logging.getLogger(__name__)


class PersonDirectory:
    """One person per mobile number; every submission refreshes the profile."""

    def __init__(self, store: PersonStore) -> None:
        self._store = store

    def upsert(
        self,
        *,
        mobile_no: str,
        email: str,
        first_name: str,
        last_name: str,
        birthday: date,
        full_address: str,
        city: str,
        vaccinated: bool,
    ) -> domain.Person:
        profile = dict(
            email=email,
            first_name=first_name,
            last_name=last_name,
            birthday=birthday,
            full_address=full_address,
            city=city,
            vaccinated=vaccinated,
        )

        existing = self._store.find_by_mobile_no(mobile_no)
        if existing is not None:
            person = self._store.save(domain.update_profile(existing, **profile))
            logger.debug("upsert: (person updated) [%s]", person)
            return person

        try:
            person = self._store.save(domain.Person(id=domain.new_id(), mobile_no=mobile_no, **profile))
        except DuplicateRecordError:
            # A concurrent first submission for the same number won the insert.
            winner = self._store.find_by_mobile_no(mobile_no)
            if winner is None:
                raise
            person = self._store.save(domain.update_profile(winner, **profile))
            logger.debug("upsert: (person updated after race) [%s]", person)
            return person

        logger.debug("upsert: (person saved) [%s]", person)
        return person
