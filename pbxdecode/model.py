# Xcode project file model.
#
# This module defines the decoded form of an Xcode project file (.pbxproj).
# Every object kind found in the `objects` table has one record class here; the
# field annotations drive decoding (see decoder.py), so a field's type is also its
# contract: `str` and `Tuple[str, ...]` fields without a default are required, fields
# defaulting to None may be absent, and DynamicValue fields accept any plist shape.
#
# Cross references stay plain identifier strings, nothing is resolved here.

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterator, Mapping, Optional, Tuple, Type, TypeVar, Union

from pbxdecode.values import DynamicValue, ValueKind

# Object identifiers are opaque strings, both as table keys and as references
XcodeID = str


# Base class for all known Xcode objects
@dataclass(frozen=True)
class XcodeObject:
    isa: str


# Nested requirement of XCRemoteSwiftPackageReference, not an object table entry
@dataclass(frozen=True)
class PackageRequirement:
    kind: str
    minimumVersion: Optional[str] = None
    maximumVersion: Optional[str] = None
    version: Optional[str] = None
    branch: Optional[str] = None
    revision: Optional[str] = None


# PBX* object types
@dataclass(frozen=True)
class PBXGroup(XcodeObject):
    children: Optional[Tuple[XcodeID, ...]] = None
    name: Optional[str] = None
    path: Optional[str] = None
    sourceTree: Optional[str] = None


@dataclass(frozen=True)
class PBXVariantGroup(XcodeObject):
    children: Tuple[XcodeID, ...]
    name: str
    sourceTree: str
    path: Optional[str] = None


@dataclass(frozen=True)
class PBXFileSystemSynchronizedRootGroup(XcodeObject):
    path: Optional[str] = None
    sourceTree: Optional[str] = None
    exceptions: Optional[Tuple[XcodeID, ...]] = None
    explicitFileTypes: Optional[Mapping[str, DynamicValue]] = field(default=None, hash=False)
    explicitFolders: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class PBXFileReference(XcodeObject):
    lastKnownFileType: Optional[str] = None
    path: Optional[str] = None
    name: Optional[str] = None
    sourceTree: Optional[str] = None
    explicitFileType: Optional[str] = None
    includeInIndex: Optional[str] = None
    fileEncoding: Optional[str] = None


@dataclass(frozen=True)
class PBXReferenceProxy(XcodeObject):
    fileType: Optional[str] = None
    path: Optional[str] = None
    remoteRef: Optional[XcodeID] = None  # PBXContainerItemProxy
    sourceTree: Optional[str] = None


@dataclass(frozen=True)
class PBXBuildFile(XcodeObject):
    fileRef: Optional[XcodeID] = None
    productRef: Optional[XcodeID] = None  # XCSwiftPackageProductDependency
    settings: Optional[Mapping[str, DynamicValue]] = field(default=None, hash=False)


# Shared shape of PBXSourcesBuildPhase, PBXFrameworksBuildPhase,
# PBXResourcesBuildPhase and PBXHeadersBuildPhase; only `isa` tells them apart.
@dataclass(frozen=True)
class PBXBuildPhase(XcodeObject):
    files: Tuple[XcodeID, ...]
    buildActionMask: Optional[str] = None
    runOnlyForDeploymentPostprocessing: Optional[str] = None


@dataclass(frozen=True)
class PBXCopyFilesBuildPhase(XcodeObject):
    dstSubfolderSpec: str
    files: Tuple[XcodeID, ...]
    buildActionMask: Optional[str] = None
    dstPath: Optional[str] = None
    runOnlyForDeploymentPostprocessing: Optional[str] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class PBXShellScriptBuildPhase(XcodeObject):
    shellPath: str
    shellScript: DynamicValue
    buildActionMask: Optional[str] = None
    files: Optional[Tuple[XcodeID, ...]] = None
    inputFileListPaths: Optional[Tuple[str, ...]] = None
    inputPaths: Optional[Tuple[str, ...]] = None
    name: Optional[str] = None
    outputFileListPaths: Optional[Tuple[str, ...]] = None
    outputPaths: Optional[Tuple[str, ...]] = None
    runOnlyForDeploymentPostprocessing: Optional[str] = None
    showEnvVarsInLog: Optional[str] = None
    alwaysOutOfDate: Optional[str] = None


@dataclass(frozen=True)
class PBXBuildRule(XcodeObject):
    compilerSpec: Optional[str] = None
    fileType: Optional[str] = None
    filePatterns: Optional[str] = None
    inputFiles: Optional[Tuple[str, ...]] = None
    isEditable: Optional[str] = None
    outputFiles: Optional[Tuple[str, ...]] = None
    outputFilesCompilerFlags: Optional[Tuple[str, ...]] = None
    outputFilesRule: Optional[str] = None
    script: Optional[str] = None
    scriptInputFiles: Optional[Tuple[str, ...]] = None
    scriptOutputFiles: Optional[Tuple[str, ...]] = None


@dataclass(frozen=True)
class PBXContainerItemProxy(XcodeObject):
    containerPortal: XcodeID  # ID of the PBXProject
    proxyType: str
    remoteGlobalIDString: XcodeID  # ID of the referenced item
    remoteInfo: str  # Name of the referenced item


@dataclass(frozen=True)
class PBXTargetDependency(XcodeObject):
    target: Optional[XcodeID] = None  # only set when the target is in the same project
    targetProxy: Optional[XcodeID] = None
    productRef: Optional[XcodeID] = None
    name: Optional[str] = None


@dataclass(frozen=True)
class PBXNativeTarget(XcodeObject):
    name: str
    buildConfigurationList: XcodeID
    buildPhases: Tuple[XcodeID, ...]
    dependencies: Optional[Tuple[XcodeID, ...]] = None
    packageProductDependencies: Optional[Tuple[XcodeID, ...]] = None
    buildRules: Optional[Tuple[XcodeID, ...]] = None
    productName: Optional[str] = None
    productReference: Optional[XcodeID] = None
    productType: Optional[str] = None
    fileSystemSynchronizedGroups: Optional[Tuple[XcodeID, ...]] = None


@dataclass(frozen=True)
class PBXAggregateTarget(XcodeObject):
    name: str
    buildConfigurationList: XcodeID
    buildPhases: Tuple[XcodeID, ...]
    dependencies: Optional[Tuple[XcodeID, ...]] = None
    productName: Optional[str] = None


@dataclass(frozen=True)
class PBXLegacyTarget(XcodeObject):
    buildArgumentsString: Optional[str] = None
    buildConfigurationList: Optional[XcodeID] = None
    buildPhases: Optional[Tuple[XcodeID, ...]] = None
    buildToolPath: Optional[str] = None
    buildWorkingDirectory: Optional[str] = None
    dependencies: Optional[Tuple[XcodeID, ...]] = None
    name: Optional[str] = None
    passBuildSettingsInEnvironment: Optional[str] = None
    productName: Optional[str] = None


@dataclass(frozen=True)
class PBXProject(XcodeObject):
    buildConfigurationList: XcodeID
    developmentRegion: str
    mainGroup: XcodeID
    targets: Tuple[XcodeID, ...]
    compatibilityVersion: Optional[str] = None
    productRefGroup: Optional[XcodeID] = None
    packageReferences: Optional[Tuple[XcodeID, ...]] = None
    projectDirPath: Optional[str] = None
    projectRoot: Optional[str] = None
    knownRegions: Optional[Tuple[str, ...]] = None
    hasScannedForEncodings: Optional[str] = None
    attributes: Optional[Mapping[str, DynamicValue]] = field(default=None, hash=False)


@dataclass(frozen=True)
class XCConfigurationList(XcodeObject):
    buildConfigurations: Tuple[XcodeID, ...]
    defaultConfigurationName: str
    defaultConfigurationIsVisible: Optional[str] = None


@dataclass(frozen=True)
class XCBuildConfiguration(XcodeObject):
    name: str
    buildSettings: Mapping[str, DynamicValue] = field(hash=False)
    baseConfigurationReference: Optional[XcodeID] = None


# Swift package objects
@dataclass(frozen=True)
class XCRemoteSwiftPackageReference(XcodeObject):
    repositoryURL: str
    requirement: PackageRequirement


@dataclass(frozen=True)
class XCLocalSwiftPackageReference(XcodeObject):
    relativePath: str


@dataclass(frozen=True)
class XCSwiftPackageProductDependency(XcodeObject):
    productName: str
    package: Optional[XcodeID] = None


# Catch-all for object kinds without a record class. `properties` holds every
# field of the original record, including `isa`.
@dataclass(frozen=True)
class UnknownObject:
    properties: Mapping[str, DynamicValue] = field(hash=False)

    @property
    def isa(self) -> Optional[str]:
        value = self.properties.get("isa")
        if value is not None and value.kind is ValueKind.STRING:
            return value.value
        return None


ObjectRecord = Union[XcodeObject, UnknownObject]

ObjectT = TypeVar("ObjectT", bound=XcodeObject)


# Complete project representation. Lists are tuples and maps are read-only views,
# so nothing is changed after decoding.
@dataclass(frozen=True)
class Project:
    archiveVersion: str
    objectVersion: str
    rootObject: XcodeID
    objects: Mapping[XcodeID, ObjectRecord] = field(default_factory=lambda: MappingProxyType({}), hash=False)

    @property
    def root(self) -> Optional[ObjectRecord]:
        # the root id is not checked at decode time, a dangling one yields None
        return self.objects.get(self.rootObject)

    def objects_of_type(self, object_type: Type[ObjectT]) -> Iterator[Tuple[XcodeID, ObjectT]]:
        for object_id, record in self.objects.items():
            if isinstance(record, object_type):
                yield object_id, record

    def unknown_objects(self) -> Iterator[Tuple[XcodeID, UnknownObject]]:
        for object_id, record in self.objects.items():
            if isinstance(record, UnknownObject):
                yield object_id, record
