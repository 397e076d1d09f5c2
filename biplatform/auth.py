"""Owner resolution for the api

Authentication happens upstream; the authenticating layer puts the owner id
on the request as `request.owner_id`.
"""

from ninja.errors import HttpError

from biplatform.utils.object_id import is_valid_object_id

UNAUTHORIZED = "unauthorized"


def get_owner_id(request) -> str:
    """the authenticated owner of this request, 401 when there is none"""
    owner_id = getattr(request, "owner_id", None)
    if not is_valid_object_id(owner_id):
        raise HttpError(401, UNAUTHORIZED)
    return owner_id

