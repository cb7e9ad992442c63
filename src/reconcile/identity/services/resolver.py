from __future__ import annotations

from typing import Any, Dict, Iterable, List, Sequence

from reconcile.shared.logging import get_logger

from ..errors import InvariantViolation, MissingIdentifierError
from ..models import Contact, ContactSummary, IdentifyResponse, LinkPrecedence
from ..repository import ContactRepository, PostgresContactRepository

logger = get_logger("identity.resolver")


class IdentityResolver:
    """Resolves a partial contact to its identity cluster.

    One call runs match, cluster collection, primary resolution, secondary
    creation and response assembly against a single transaction handle. The
    resolver keeps no state between calls; the caller owns commit and retry.
    """

    def __init__(self, repository: ContactRepository | None = None) -> None:
        self._repository = repository or PostgresContactRepository()

    async def identify(
        self, tx: Any, email: str | None, phone_number: str | None
    ) -> IdentifyResponse:
        if not email and not phone_number:
            raise MissingIdentifierError()

        matches = await self._repository.find_matching_contacts(tx, email, phone_number)
        if not matches:
            return await self._create_primary(tx, email, phone_number)

        cluster = await self._collect_cluster(tx, matches)
        primary = await self._resolve_primary(tx, cluster)

        members = await self._refresh_cluster(tx, primary)
        await self._create_secondary_if_needed(tx, primary, members, email, phone_number)

        secondaries = await self._repository.find_contacts_by_primary_id(tx, primary.id)
        return build_response(primary, secondaries)

    async def _create_primary(
        self, tx: Any, email: str | None, phone_number: str | None
    ) -> IdentifyResponse:
        contact = await self._repository.create_contact(
            tx,
            email=email,
            phone_number=phone_number,
            link_precedence=LinkPrecedence.PRIMARY,
        )
        logger.info("primary_contact_created", contact_id=contact.id)
        return build_response(contact, [])

    async def _collect_cluster(self, tx: Any, matches: Sequence[Contact]) -> List[Contact]:
        contacts: Dict[int, Contact] = {contact.id: contact for contact in matches}

        primary_ids: List[int] = []
        for contact in matches:
            owner_id = contact.id if contact.is_primary else contact.linked_id
            if owner_id is None:
                raise InvariantViolation(f"secondary contact {contact.id} has no linked_id")
            if owner_id not in primary_ids:
                primary_ids.append(owner_id)

        for primary_id in primary_ids:
            primary = contacts.get(primary_id)
            if primary is None:
                primary = await self._repository.find_contact_by_id(tx, primary_id)
                if primary is not None and primary.deleted_at is not None:
                    primary = None
                if primary is not None:
                    contacts[primary.id] = primary
            if primary is not None and not primary.is_primary:
                raise InvariantViolation(
                    f"contact {primary.id} is referenced as a primary but is {primary.link_precedence.value}"
                )
            for secondary in await self._repository.find_contacts_by_primary_id(tx, primary_id):
                contacts[secondary.id] = secondary

        return sorted(contacts.values(), key=lambda contact: contact.sort_key)

    async def _resolve_primary(self, tx: Any, cluster: Sequence[Contact]) -> Contact:
        primaries = sorted(
            (contact for contact in cluster if contact.is_primary),
            key=lambda contact: contact.sort_key,
        )
        if not primaries:
            raise InvariantViolation(
                f"cluster of contacts {[contact.id for contact in cluster]} has no primary"
            )

        oldest, newer = primaries[0], primaries[1:]
        if not newer:
            return oldest

        logger.info(
            "primaries_merged",
            primary_id=oldest.id,
            demoted_ids=[contact.id for contact in newer],
        )
        for demoted in newer:
            await self._repository.update_contact(
                tx,
                demoted.id,
                linked_id=oldest.id,
                link_precedence=LinkPrecedence.SECONDARY,
            )
            for secondary in await self._repository.find_contacts_by_primary_id(tx, demoted.id):
                await self._repository.update_contact(tx, secondary.id, linked_id=oldest.id)
        return oldest

    async def _refresh_cluster(self, tx: Any, primary: Contact) -> List[Contact]:
        secondaries = await self._repository.find_contacts_by_primary_id(tx, primary.id)
        return [primary, *secondaries]

    async def _create_secondary_if_needed(
        self,
        tx: Any,
        primary: Contact,
        members: Sequence[Contact],
        email: str | None,
        phone_number: str | None,
    ) -> None:
        if combination_exists(members, email, phone_number):
            logger.debug("identify_combination_exists", primary_id=primary.id)
            return

        new_email = bool(email) and all(member.email != email for member in members)
        new_phone = bool(phone_number) and all(
            member.phone_number != phone_number for member in members
        )
        if not (new_email or new_phone):
            return

        contact = await self._repository.create_contact(
            tx,
            email=email,
            phone_number=phone_number,
            link_precedence=LinkPrecedence.SECONDARY,
            linked_id=primary.id,
        )
        logger.info(
            "secondary_contact_created",
            contact_id=contact.id,
            primary_id=primary.id,
            new_email=new_email,
            new_phone=new_phone,
        )


def combination_exists(
    members: Iterable[Contact], email: str | None, phone_number: str | None
) -> bool:
    """True when one member already carries every supplied identifier."""
    for member in members:
        email_matches = not email or member.email == email
        phone_matches = not phone_number or member.phone_number == phone_number
        if email_matches and phone_matches:
            return True
    return False


def build_response(primary: Contact, secondaries: Sequence[Contact]) -> IdentifyResponse:
    emails: List[str] = []
    phone_numbers: List[str] = []
    secondary_ids: List[int] = []

    if primary.email:
        emails.append(primary.email)
    if primary.phone_number:
        phone_numbers.append(primary.phone_number)

    for secondary in secondaries:
        secondary_ids.append(secondary.id)
        if secondary.email and secondary.email not in emails:
            emails.append(secondary.email)
        if secondary.phone_number and secondary.phone_number not in phone_numbers:
            phone_numbers.append(secondary.phone_number)

    return IdentifyResponse(
        contact=ContactSummary(
            primary_contact_id=primary.id,
            emails=emails,
            phone_numbers=phone_numbers,
            secondary_contact_ids=secondary_ids,
        )
    )


__all__ = ["IdentityResolver", "build_response", "combination_exists"]
