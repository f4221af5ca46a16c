"""Core SCIM data layer.

Pure Python (no HTTP dependencies): typed resources, the extensible-resource
codec, the resource-type registry and the protocol messages.

Module Structure:
    - codec.py            : Field tables, decode/encode, RFC 3339 timestamps
    - resource.py         : CommonAttributes, Meta, extension accessor API
    - resource_type.py    : ResourceType descriptor
    - user.py / group.py  : Core User and Group resources
    - enterprise_user.py  : Enterprise User extension
    - schema.py           : Schema discovery resource
    - service_provider_config.py : ServiceProviderConfig discovery resource
    - registry.py         : Resource-type registry
    - protocol.py         : ListResponse (polymorphic), SearchRequest, ErrorResponse
    - query.py            : Filter helpers
    - exceptions.py       : Typed exceptions

Usage Pattern:
    from scimclient.core.codec import decode, encode
    from scimclient.core.user import User
    from scimclient.core.enterprise_user import EnterpriseUser

    user = decode(body, User())
    enterprise = user.get_extension(EnterpriseUser())
"""
