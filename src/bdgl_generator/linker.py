"""Version and extension linking.

Turns the raw per-feature require/remove lists of a ``Registry`` into a chain
of resolved versions in which every symbol belongs to exactly one version.
"""

from dataclasses import dataclass, field
from typing import Iterable, Iterator, Optional

from .errors import ConsistencyError
from .registry import Registry
from .types import ApiSlice, Extension, Feature


@dataclass
class Api:
    """All features and compatible extensions of one api name ("gl", "gles2", ...)."""

    name: str
    features: list[Feature] = field(default_factory=list)  # ascending by version
    extensions: list[Extension] = field(default_factory=list)
    registry: Optional[Registry] = field(default=None, repr=False)

    def index_of(self, feature: Feature) -> int:
        for index, candidate in enumerate(self.features):
            if candidate is feature:
                return index
        raise ValueError(f"{feature.name} is not a feature of api '{self.name}'")

    def previous(self, feature: Feature) -> Optional[Feature]:
        """The feature immediately before ``feature`` in version order."""
        index = self.index_of(feature)
        return self.features[index - 1] if index > 0 else None

    def find_feature(self, number: str) -> Optional[Feature]:
        for feature in self.features:
            if feature.number == number:
                return feature
        return None

    def profiles(self) -> set[str]:
        """Every profile named by a require/remove block of this api."""
        profiles = set()
        for feature in self.features:
            for block in feature.requires + feature.removes:
                if block.profile is not None:
                    profiles.add(block.profile)
        return profiles


@dataclass
class ApiVersion:
    """A feature with its resolved, deduplicated symbol set."""

    feature: Feature
    profile: ApiSlice
    previous: Optional["ApiVersion"] = None

    def chain(self) -> Iterator["ApiVersion"]:
        """This version followed by each earlier one, newest first."""
        version: Optional[ApiVersion] = self
        while version is not None:
            yield version
            version = version.previous

    def oldest_first(self) -> list["ApiVersion"]:
        return list(reversed(list(self.chain())))


@dataclass
class ApiExtension:
    """An extension's requirements merged for one profile."""

    name: str
    requires: ApiSlice


def link(registry: Registry) -> dict[str, Api]:
    """Group the registry's features and extensions by api name."""
    apis: dict[str, Api] = {}

    for feature in registry.features.values():
        api = apis.get(feature.api)
        if api is None:
            api = apis[feature.api] = Api(name=feature.api, registry=registry)
        api.features.append(feature)

    for api in apis.values():
        api.features.sort(key=lambda f: f.version_key)

        for earlier, later in zip(api.features, api.features[1:]):
            if earlier.version_key == later.version_key:
                raise ConsistencyError(
                    f"features {earlier.name} and {later.name} of api '{api.name}' "
                    f"share version {later.number}",
                    name=later.number,
                    owner=api.name,
                )

        api.extensions = [
            extension
            for extension in registry.extensions.values()
            if extension.supports(api.name)
        ]

    return apis


def _merge(blocks: Iterable[ApiSlice], profile: Optional[str], into: ApiSlice) -> None:
    for block in blocks:
        if block.applies_to(profile):
            into.add_all(block)


def _resolve(
    api: Api, index: int, removed: ApiSlice, profile: Optional[str]
) -> ApiVersion:
    feature = api.features[index]
    version = ApiVersion(feature=feature, profile=ApiSlice(profile=profile))
    slice_ = version.profile

    _merge(feature.requires, profile, slice_)

    # Drop anything a version at or after this one (up to the target) removed
    slice_.remove_all(removed)

    # Removals here also apply to every earlier version
    _merge(feature.removes, profile, removed)

    if index > 0:
        version.previous = _resolve(api, index - 1, removed, profile)

        # Later versions re-list earlier symbols; keep each in its first version only
        for earlier in version.previous.chain():
            slice_.remove_all(earlier.profile)

    return version


def resolve(api: Api, feature: Feature, profile: Optional[str]) -> ApiVersion:
    """Resolve ``feature`` and all earlier features of ``api`` for ``profile``."""
    return _resolve(api, api.index_of(feature), ApiSlice(), profile)


def link_api(api: Api, version: str, profile: Optional[str]) -> Optional[ApiVersion]:
    """Resolve the version numbered ``version`` ("3.3"). None if there is no such version."""
    feature = api.find_feature(version)
    if feature is None:
        return None
    return resolve(api, feature, profile)


def link_all_versions(api: Api, profile: Optional[str]) -> list[ApiVersion]:
    """Resolve every version of ``api``, each as its own target."""
    return [resolve(api, feature, profile) for feature in api.features]


def link_extensions(
    api: Api, profile: Optional[str], name_filter: Optional[Iterable[str]] = None
) -> list[ApiExtension]:
    """Merge each compatible extension's requirements for ``profile``.

    With a ``name_filter`` only the named extensions are kept. Extensions that
    end up with no commands are still returned; they may only add enums.
    """
    allowed = set(name_filter) if name_filter is not None else None
    api_extensions = []

    for extension in api.extensions:
        if allowed is not None and extension.name not in allowed:
            continue

        requires = ApiSlice(profile=profile)
        _merge(extension.requires, profile, requires)

        if api.registry is not None:
            for command_name in sorted(requires.commands):
                if command_name not in api.registry.commands:
                    raise ConsistencyError(
                        f"extension '{extension.name}' references non-existent "
                        f"command: {command_name}",
                        name=command_name,
                        owner=extension.name,
                    )

        api_extensions.append(ApiExtension(name=extension.name, requires=requires))

    return api_extensions
