# ABOUTME: Known licence families, recognition of licence templates and short names
# ABOUTME: Picks one licence out of several candidates with a deterministic priority

import re
from collections.abc import Iterable

from commons_attribution.asset.models import Licence

CC_ZERO = Licence(
    id="cc-zero",
    name="CC0 1.0",
    url="https://creativecommons.org/publicdomain/zero/1.0/legalcode",
    version="1.0",
    group="cc0",
)

PUBLIC_DOMAIN = Licence(id="PD", name="Public Domain", group="pd")

# Template names as transcluded on Commons, e.g. "Cc-by-sa-3.0", "Cc-by-2.0-de",
# "Cc-by-sa-4.0,3.0,2.5,2.0,1.0" or "Cc-by-sa-3.0-migrated".
_CC_TEMPLATE = re.compile(
    r"^cc-by(?P<sa>-sa)?-(?P<version>\d\.\d)(?:,[\d.,]+)?(?:-(?P<jurisdiction>[a-z]{2,3}))?(?:-migrated.*)?$",
    re.IGNORECASE,
)
_CC_ZERO_TEMPLATE = re.compile(r"^(?:cc-?zero|cc0)(?:-1\.0)?$", re.IGNORECASE)
_PD_TEMPLATE = re.compile(r"^pd(?:[- ].*)?$", re.IGNORECASE)

# Short names from the extmetadata LicenseShortName field, e.g. "CC BY-SA 3.0 DE".
_CC_SHORT_NAME = re.compile(
    r"^cc[ -]by(?P<sa>-sa)?[ -](?P<version>\d\.\d)(?:[ -](?P<jurisdiction>[a-z]{2,3}))?$",
    re.IGNORECASE,
)
_CC_ZERO_SHORT_NAME = re.compile(r"^cc0(?: 1\.0)?$|^cc[ -]zero$", re.IGNORECASE)
_PD_SHORT_NAME = re.compile(r"^(?:public domain|pd)$", re.IGNORECASE)

_GROUP_RANK = {"pd": 0, "cc0": 1, "cc": 2}


def creative_commons(version: str, share_alike: bool = False, jurisdiction: str | None = None) -> Licence:
    """Build the Creative Commons Attribution (Share-Alike) licence of the given version."""
    code = "by-sa" if share_alike else "by"
    jurisdiction = jurisdiction.lower() if jurisdiction else None

    licence_id = f"cc-{code}-{version}"
    name = f"CC {code.upper()} {version}"
    url = f"https://creativecommons.org/licenses/{code}/{version}/"
    if jurisdiction:
        licence_id += f"-{jurisdiction}"
        name += f" {jurisdiction.upper()}"
        url += f"{jurisdiction}/"

    return Licence(
        id=licence_id,
        name=name,
        url=url + "legalcode",
        share_alike=share_alike,
        version=version,
        jurisdiction=jurisdiction,
        group="cc",
    )


def _strip_namespace(title: str) -> str:
    return title.split(":", 1)[1] if ":" in title else title


def licence_from_template(template_title: str) -> Licence | None:
    """Recognize a licence template such as ``Template:Cc-by-sa-3.0``, None if it is no licence."""
    name = _strip_namespace(template_title).strip().replace("_", "-")

    match = _CC_TEMPLATE.match(name)
    if match:
        return creative_commons(match["version"], bool(match["sa"]), match["jurisdiction"])
    if _CC_ZERO_TEMPLATE.match(name):
        return CC_ZERO
    if _PD_TEMPLATE.match(name):
        return PUBLIC_DOMAIN
    return None


def licence_from_short_name(short_name: str) -> Licence | None:
    """Recognize a licence from its human-readable short name such as ``CC BY-SA 3.0``."""
    name = " ".join(short_name.split())

    match = _CC_SHORT_NAME.match(name)
    if match:
        return creative_commons(match["version"], bool(match["sa"]), match["jurisdiction"])
    if _CC_ZERO_SHORT_NAME.match(name):
        return CC_ZERO
    if _PD_SHORT_NAME.match(name):
        return PUBLIC_DOMAIN
    return None


def pick_licence(candidates: Iterable[Licence]) -> Licence | None:
    """Choose the single licence an asset is reused under.

    Non-Share-Alike licences win over Share-Alike ones. Among otherwise equal candidates the
    more permissive family wins (public domain, then CC0, then CC BY), then the higher version,
    then the unported licence over a ported one, and finally the one declared first.
    """
    unique: dict[str, Licence] = {}
    for licence in candidates:
        unique.setdefault(licence.id, licence)

    if not unique:
        return None

    ranked = sorted(
        enumerate(unique.values()),
        key=lambda item: (
            item[1].share_alike,
            _GROUP_RANK[item[1].group],
            -item[1].version_ordinal,
            item[1].jurisdiction is not None,
            item[0],
        ),
    )
    return ranked[0][1]
