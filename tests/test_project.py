import datetime
import plistlib
import unittest

from pbxdecode.decoder import decode, decode_document
from pbxdecode.errors import MalformedDocument, MissingField, TypeMismatch, UnsupportedValue
from pbxdecode.model import (
    PBXBuildPhase,
    PBXFileReference,
    PBXGroup,
    PBXNativeTarget,
    PBXProject,
    UnknownObject,
    XCBuildConfiguration,
)
from pbxdecode.values import ValueKind


def make_document(objects, root="P001"):
    return {
        "archiveVersion": "1",
        "classes": {},
        "objectVersion": "77",
        "objects": objects,
        "rootObject": root,
    }


def two_object_document():
    return make_document(
        {
            "P001": {
                "isa": "PBXProject",
                "buildConfigurationList": "CL01",
                "developmentRegion": "en",
                "mainGroup": "G001",
                "targets": ["T001"],
            },
            "T001": {
                "isa": "PBXNativeTarget",
                "name": "App",
                "buildConfigurationList": "CL02",
                "buildPhases": [],
            },
        }
    )


SAMPLE_PBXPROJ = """// !$*UTF8*$!
{
	archiveVersion = 1;
	classes = {
	};
	objectVersion = 56;
	objects = {

/* Begin PBXBuildFile section */
		B0000001 /* main.swift in Sources */ = {isa = PBXBuildFile; fileRef = F0000001 /* main.swift */; };
/* End PBXBuildFile section */

/* Begin PBXFileReference section */
		F0000001 /* main.swift */ = {isa = PBXFileReference; lastKnownFileType = sourcecode.swift; path = main.swift; sourceTree = "<group>"; };
/* End PBXFileReference section */

		G0000001 = {
			isa = PBXGroup;
			children = (
				F0000001 /* main.swift */,
			);
			sourceTree = "<group>";
		};
		S0000001 /* Sources */ = {
			isa = PBXSourcesBuildPhase;
			buildActionMask = 2147483647;
			files = (
				B0000001 /* main.swift in Sources */,
			);
			runOnlyForDeploymentPostprocessing = 0;
		};
		T0000001 /* Tool */ = {
			isa = PBXNativeTarget;
			buildConfigurationList = L0000002;
			buildPhases = (
				S0000001 /* Sources */,
			);
			buildRules = (
			);
			dependencies = (
			);
			name = Tool;
			productName = Tool;
			productType = "com.apple.product-type.tool";
		};
		P0000001 /* Project object */ = {
			isa = PBXProject;
			attributes = {
				LastSwiftUpdateCheck = 1500;
			};
			buildConfigurationList = L0000001;
			compatibilityVersion = "Xcode 14.0";
			developmentRegion = en;
			knownRegions = (
				en,
				Base,
			);
			mainGroup = G0000001;
			targets = (
				T0000001 /* Tool */,
			);
		};
		C0000001 /* Debug */ = {
			isa = XCBuildConfiguration;
			buildSettings = {
				SWIFT_VERSION = 5.0;
				OTHER_LDFLAGS = (
					"-ObjC",
					"-lz",
				);
			};
			name = Debug;
		};
		X0000001 = {
			isa = PBXFutureSection;
			payload = "kept as text";
		};
	};
	rootObject = P0000001 /* Project object */;
}
"""


class ProjectAssemblyTestCase(unittest.TestCase):
    def testTwoObjectProject(self):
        project = decode(plistlib.dumps(two_object_document()))
        self.assertEqual(len(project.objects), 2)
        root = project.objects[project.rootObject]
        self.assertIsInstance(root, PBXProject)
        self.assertEqual(root.targets, ("T001",))
        self.assertIs(project.root, root)
        target = project.objects["T001"]
        self.assertIsInstance(target, PBXNativeTarget)
        self.assertEqual(target.buildPhases, ())
        self.assertIsNone(target.dependencies)

    def testBinaryEncoding(self):
        project = decode(plistlib.dumps(two_object_document(), fmt=plistlib.FMT_BINARY))
        self.assertEqual(project.archiveVersion, "1")
        self.assertEqual(project.objectVersion, "77")
        self.assertIsInstance(project.root, PBXProject)

    def testBuildSettingsKeepTheirShapes(self):
        document = make_document(
            {
                "BC01": {
                    "isa": "XCBuildConfiguration",
                    "name": "Release",
                    "buildSettings": {
                        "PRODUCT_NAME": "App",
                        "CURRENT_PROJECT_VERSION": 3,
                        "HEADER_SEARCH_PATHS": ["$(inherited)", ["nested"]],
                    },
                }
            },
            root="BC01",
        )
        project = decode(plistlib.dumps(document))
        settings = project.objects["BC01"].buildSettings
        self.assertEqual(settings["PRODUCT_NAME"].kind, ValueKind.STRING)
        self.assertEqual(settings["CURRENT_PROJECT_VERSION"].kind, ValueKind.INTEGER)
        self.assertEqual(settings["HEADER_SEARCH_PATHS"].kind, ValueKind.LIST)
        self.assertEqual(
            [item.kind for item in settings["HEADER_SEARCH_PATHS"].value],
            [ValueKind.STRING, ValueKind.LIST],
        )

    def testDanglingRootIsNotAnError(self):
        project = decode_document(make_document({}, root="MISSING"))
        self.assertEqual(project.objects, {})
        self.assertIsNone(project.root)

    def testOneBadObjectFailsTheWholeTable(self):
        objects = {
            f"G{index:03d}": {"isa": "PBXGroup", "children": [], "name": f"group {index}"}
            for index in range(50)
        }
        objects["G025"] = {"isa": "PBXGroup", "children": "not a list"}
        with self.assertRaises(TypeMismatch) as ctx:
            decode(plistlib.dumps(make_document(objects, root="G000")))
        self.assertEqual(ctx.exception.path, ("objects", "G025", "children"))

    def testFiftyGoodObjects(self):
        objects = {f"G{index:03d}": {"isa": "PBXGroup", "children": []} for index in range(50)}
        project = decode_document(make_document(objects, root="G000"))
        self.assertEqual(len(project.objects), 50)
        self.assertEqual(len(list(project.objects_of_type(PBXGroup))), 50)

    def testXmlWithByteOrderMark(self):
        project = decode(b"\xef\xbb\xbf" + plistlib.dumps(two_object_document()))
        self.assertIsInstance(project.root, PBXProject)
        self.assertEqual(len(project.objects), 2)

    def testUtf16Xml(self):
        text = plistlib.dumps(two_object_document()).decode("utf-8")
        text = text.replace('encoding="UTF-8"', 'encoding="UTF-16"')
        project = decode(text.encode("utf-16"))
        self.assertIsInstance(project.root, PBXProject)
        self.assertEqual(project.objects["T001"].name, "App")

    def testObjectsTableIsReadOnly(self):
        project = decode(plistlib.dumps(two_object_document()))
        with self.assertRaises(TypeError):
            project.objects["P002"] = project.root
        with self.assertRaises(TypeError):
            del project.objects["T001"]
        with self.assertRaises(AttributeError):
            project.rootObject = "T001"
        self.assertEqual(len(project.objects), 2)

    def testProjectAndRecordsAreHashable(self):
        project = decode(plistlib.dumps(two_object_document()))
        self.assertIsInstance(hash(project), int)
        self.assertIsInstance(hash(project.root), int)
        self.assertEqual(len(set(project.objects.values())), 2)

    def testDateInBuildSettings(self):
        document = make_document(
            {"BC01": {"isa": "XCBuildConfiguration", "name": "Debug", "buildSettings": {"STAMP": datetime.datetime(2024, 5, 1)}}},
            root="BC01",
        )
        with self.assertRaises(UnsupportedValue) as ctx:
            decode(plistlib.dumps(document))
        self.assertEqual(ctx.exception.path, ("objects", "BC01", "buildSettings", "STAMP"))


class ProjectFailureTestCase(unittest.TestCase):
    def testMissingRootObject(self):
        document = two_object_document()
        del document["rootObject"]
        with self.assertRaises(MissingField) as ctx:
            decode_document(document)
        self.assertEqual(ctx.exception.path, ("rootObject",))

    def testMissingArchiveVersion(self):
        document = two_object_document()
        del document["archiveVersion"]
        with self.assertRaises(MissingField) as ctx:
            decode(plistlib.dumps(document))
        self.assertEqual(ctx.exception.path, ("archiveVersion",))
        self.assertEqual(ctx.exception.field, "archiveVersion")

    def testMissingObjectVersion(self):
        document = two_object_document()
        del document["objectVersion"]
        with self.assertRaises(MissingField) as ctx:
            decode(plistlib.dumps(document))
        self.assertEqual(ctx.exception.path, ("objectVersion",))
        self.assertEqual(ctx.exception.field, "objectVersion")

    def testMissingObjects(self):
        document = two_object_document()
        del document["objects"]
        with self.assertRaises(MissingField):
            decode_document(document)

    def testVersionMustBeString(self):
        document = two_object_document()
        document["objectVersion"] = 77
        with self.assertRaises(TypeMismatch) as ctx:
            decode(plistlib.dumps(document))
        self.assertEqual(ctx.exception.path, ("objectVersion",))

    def testObjectsMustBeMap(self):
        document = two_object_document()
        document["objects"] = ["P001"]
        with self.assertRaises(TypeMismatch):
            decode_document(document)

    def testTopLevelMustBeMap(self):
        with self.assertRaises(MalformedDocument) as ctx:
            decode(plistlib.dumps(["not", "a", "project"]))
        self.assertEqual(ctx.exception.path, ())

    def testInvalidXml(self):
        with self.assertRaises(MalformedDocument):
            decode(b"<?xml version='1.0'?><plist><dict><key>a</key>")

    def testMalformedDateInXml(self):
        data = plistlib.dumps(two_object_document()).replace(
            b"<key>archiveVersion</key>",
            b"<key>stamp</key>\n\t<date>garbage</date>\n\t<key>archiveVersion</key>",
        )
        with self.assertRaises(MalformedDocument) as ctx:
            decode(data)
        self.assertEqual(ctx.exception.path, ())

    def testInvalidBinary(self):
        with self.assertRaises(MalformedDocument):
            decode(b"bplist00 this is not really binary")

    def testGarbage(self):
        with self.assertRaises(MalformedDocument):
            decode(b"\x00\x01\x02")

    def testInvalidUtf8(self):
        with self.assertRaises(MalformedDocument):
            decode(b"{ a = \xff; }")


class OpenStepProjectTestCase(unittest.TestCase):
    def setUp(self):
        self.project = decode(SAMPLE_PBXPROJ.encode("utf-8"))

    def testHeader(self):
        self.assertEqual(self.project.archiveVersion, "1")
        self.assertEqual(self.project.objectVersion, "56")
        self.assertEqual(self.project.rootObject, "P0000001")
        self.assertEqual(len(self.project.objects), 8)

    def testKnownObjects(self):
        root = self.project.root
        self.assertIsInstance(root, PBXProject)
        self.assertEqual(root.targets, ("T0000001",))
        self.assertEqual(root.knownRegions, ("en", "Base"))
        self.assertEqual(root.attributes["LastSwiftUpdateCheck"].kind, ValueKind.STRING)
        phase = self.project.objects["S0000001"]
        self.assertIsInstance(phase, PBXBuildPhase)
        self.assertEqual(phase.isa, "PBXSourcesBuildPhase")
        self.assertEqual(phase.runOnlyForDeploymentPostprocessing, "0")
        file_ref = self.project.objects["F0000001"]
        self.assertIsInstance(file_ref, PBXFileReference)
        self.assertEqual(file_ref.sourceTree, "<group>")

    def testBuildSettingsAreText(self):
        config = self.project.objects["C0000001"]
        self.assertIsInstance(config, XCBuildConfiguration)
        self.assertEqual(config.buildSettings["SWIFT_VERSION"].kind, ValueKind.STRING)
        self.assertEqual(config.buildSettings["SWIFT_VERSION"].value, "5.0")
        self.assertEqual(config.buildSettings["OTHER_LDFLAGS"].unwrap(), ["-ObjC", "-lz"])

    def testUnknownSection(self):
        unknown = dict(self.project.unknown_objects())
        self.assertEqual(list(unknown), ["X0000001"])
        self.assertIsInstance(unknown["X0000001"], UnknownObject)
        self.assertEqual(unknown["X0000001"].isa, "PBXFutureSection")


if __name__ == "__main__":
    unittest.main()
