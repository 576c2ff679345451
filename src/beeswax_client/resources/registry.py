"""Registry of Beeswax resource types.

Each entry maps an attribute name on the client to the REST collection
it wraps and the record field holding its identifier. The identifier
field doubles as the sort key for paginated reads.
"""

from typing import Dict, Tuple

from ..models import ResourceDescriptor

_RESOURCES: Tuple[ResourceDescriptor, ...] = (
    ResourceDescriptor(
        name="advertisers", endpoint="/rest/v2/advertisers", id_field="advertiser_id"
    ),
    ResourceDescriptor(
        name="campaigns", endpoint="/rest/v2/campaigns", id_field="campaign_id"
    ),
    ResourceDescriptor(
        name="creatives",
        endpoint="/rest/creative",
        id_field="creative_id",
        deprecated=True,
    ),
    ResourceDescriptor(
        name="line_items", endpoint="/rest/v2/line-items", id_field="line_item_id"
    ),
    ResourceDescriptor(
        name="line_item_flights",
        endpoint="/rest/line_item_flight",
        id_field="line_item_flight_id",
        deprecated=True,
    ),
    ResourceDescriptor(
        name="targeting_templates",
        endpoint="/rest/v2/targeting-expressions",
        id_field="targeting_template_id",
    ),
    ResourceDescriptor(
        name="segment_uploads",
        endpoint="/rest/segment_upload",
        id_field="segment_upload_id",
        deprecated=True,
    ),
    ResourceDescriptor(
        name="segment_category_sharings",
        endpoint="/rest/segment_category_sharing",
        id_field="segment_category_sharing_id",
        deprecated=True,
    ),
    ResourceDescriptor(
        name="segment_sharings",
        endpoint="/rest/segment_sharing",
        id_field="segment_sharing_id",
        deprecated=True,
    ),
    ResourceDescriptor(
        name="segment_category_associations",
        endpoint="/rest/segment_category_association",
        id_field="segment_category_association_id",
        deprecated=True,
    ),
    ResourceDescriptor(
        name="segments",
        endpoint="/rest/segment",
        id_field="segment_id",
        deprecated=True,
    ),
    ResourceDescriptor(
        name="segment_categories",
        endpoint="/rest/segment_category",
        id_field="segment_category_id",
        deprecated=True,
    ),
)

RESOURCES: Dict[str, ResourceDescriptor] = {r.name: r for r in _RESOURCES}

