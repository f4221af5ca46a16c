"""SCIM User resource (RFC 7643 section 4.1)."""
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional

from .codec import Boolean, Field, ListOf, Nested, Record, String
from .resource import CommonAttributes, Multivalued, StringMultivalued
from .resource_type import builtin_resource_type

USER_URN = "urn:ietf:params:scim:schemas:core:2.0:User"

USER_RESOURCE_TYPE = builtin_resource_type(
    "User",
    "/Users",
    USER_URN,
    "SCIM User - See https://tools.ietf.org/html/rfc7643#section-4.1",
)


@dataclass
class Name(Record):
    """Components of the user's real name."""
    formatted: Optional[str] = None
    family_name: Optional[str] = None
    given_name: Optional[str] = None
    middle_name: Optional[str] = None
    honorific_prefix: Optional[str] = None
    honorific_suffix: Optional[str] = None

    FIELDS = (
        Field("formatted", "formatted", String()),
        Field("family_name", "familyName", String()),
        Field("given_name", "givenName", String()),
        Field("middle_name", "middleName", String()),
        Field("honorific_prefix", "honorificPrefix", String()),
        Field("honorific_suffix", "honorificSuffix", String()),
    )


@dataclass
class Address(Multivalued):
    """Physical mailing address; canonical types are work, home and other."""
    country: Optional[str] = None
    formatted: Optional[str] = None
    locality: Optional[str] = None
    postal_code: Optional[str] = None
    region: Optional[str] = None
    street_address: Optional[str] = None

    FIELDS = Multivalued.FIELDS + (
        Field("country", "country", String()),
        Field("formatted", "formatted", String()),
        Field("locality", "locality", String()),
        Field("postal_code", "postalCode", String()),
        Field("region", "region", String()),
        Field("street_address", "streetAddress", String()),
    )


# Simple multi-valued attributes all carry their value in StringMultivalued.value
Email = StringMultivalued
Entitlement = StringMultivalued
GroupRef = StringMultivalued
IM = StringMultivalued
PhoneNumber = StringMultivalued
Photo = StringMultivalued
Role = StringMultivalued
X509Certificate = StringMultivalued


def _multi() -> ListOf:
    return ListOf(Nested(StringMultivalued))


@dataclass
class User(CommonAttributes):
    """A SCIM user.

    ``user_name`` is required by the protocol and unique across the service
    provider; everything else is optional.
    """
    active: Optional[bool] = None
    addresses: Optional[List[Address]] = None
    display_name: Optional[str] = None
    emails: Optional[List[Email]] = None
    entitlements: Optional[List[Entitlement]] = None
    groups: Optional[List[GroupRef]] = None
    ims: Optional[List[IM]] = None
    locale: Optional[str] = None
    name: Optional[Name] = None
    nick_name: Optional[str] = None
    password: Optional[str] = None
    phone_numbers: Optional[List[PhoneNumber]] = None
    photos: Optional[List[Photo]] = None
    profile_url: Optional[str] = None
    preferred_language: Optional[str] = None
    roles: Optional[List[Role]] = None
    timezone: Optional[str] = None
    title: Optional[str] = None
    user_name: Optional[str] = None
    user_type: Optional[str] = None
    x509_certificates: Optional[List[X509Certificate]] = None

    URN = USER_URN
    RESOURCE_TYPE = USER_RESOURCE_TYPE

    FIELDS = CommonAttributes.FIELDS + (
        Field("active", "active", Boolean()),
        Field("addresses", "addresses", ListOf(Nested(Address))),
        Field("display_name", "displayName", String()),
        Field("emails", "emails", _multi()),
        Field("entitlements", "entitlements", _multi()),
        Field("groups", "groups", _multi()),
        Field("ims", "ims", _multi()),
        Field("locale", "locale", String()),
        Field("name", "name", Nested(Name)),
        Field("nick_name", "nickName", String()),
        Field("password", "password", String()),
        Field("phone_numbers", "phoneNumbers", _multi()),
        Field("photos", "photos", _multi()),
        Field("profile_url", "profileUrl", String()),
        Field("preferred_language", "preferredLanguage", String()),
        Field("roles", "roles", _multi()),
        Field("timezone", "timezone", String()),
        Field("title", "title", String()),
        Field("user_name", "userName", String()),
        Field("user_type", "userType", String()),
        Field("x509_certificates", "x509Certificates", _multi()),
    )

    def primary_email(self) -> Optional[str]:
        """Return the primary email value, or the first one if none is flagged."""
        if not self.emails:
            return None
        primary = next((e.value for e in self.emails if e.primary), None)
        return primary or self.emails[0].value
