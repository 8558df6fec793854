"""Catalog of external (non-source) types.

Analysis only sees the project's own ``.cs`` files, so calls into the BCL,
UnityEngine, UnityEditor or NPOI would otherwise be unresolvable. The catalog
lists the types and methods those rules care about; users extend it through
the ``catalog`` config section.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from zgame_analyzers.config.models import CatalogConfig, CatalogTypeConfig
from zgame_analyzers.semantics.symbols import TypeKind, TypeSymbol

_LINQ_OPERATORS = (
    "Aggregate",
    "All",
    "Any",
    "Append",
    "AsEnumerable",
    "Average",
    "Cast",
    "Concat",
    "Contains",
    "Count",
    "DefaultIfEmpty",
    "Distinct",
    "ElementAt",
    "ElementAtOrDefault",
    "Except",
    "First",
    "FirstOrDefault",
    "GroupBy",
    "GroupJoin",
    "Intersect",
    "Join",
    "Last",
    "LastOrDefault",
    "LongCount",
    "Max",
    "Min",
    "OfType",
    "OrderBy",
    "OrderByDescending",
    "Prepend",
    "Reverse",
    "Select",
    "SelectMany",
    "SequenceEqual",
    "Single",
    "SingleOrDefault",
    "Skip",
    "SkipWhile",
    "Sum",
    "Take",
    "TakeWhile",
    "ThenBy",
    "ThenByDescending",
    "ToArray",
    "ToDictionary",
    "ToHashSet",
    "ToList",
    "ToLookup",
    "Union",
    "Where",
    "Zip",
)


@dataclass(frozen=True)
class ExternalType:
    """An external type with the members the resolver may bind to."""

    full_name: str
    kind: TypeKind = "class"
    base_type: str | None = None
    interfaces: tuple[str, ...] = ()
    methods: frozenset[str] = frozenset()
    static_methods: frozenset[str] = frozenset()
    extension_methods: frozenset[str] = frozenset()

    def symbol(self) -> TypeSymbol:
        bases = ((self.base_type,) if self.base_type else ()) + self.interfaces
        return TypeSymbol(
            full_name=self.full_name,
            kind=self.kind,
            base_types=bases,
            is_external=True,
        )

    @classmethod
    def from_config(cls, full_name: str, cfg: CatalogTypeConfig) -> ExternalType:
        return cls(
            full_name=full_name,
            kind=cfg.kind,
            base_type=cfg.base_type,
            interfaces=tuple(cfg.interfaces),
            methods=frozenset(cfg.methods),
            static_methods=frozenset(cfg.static_methods),
            extension_methods=frozenset(cfg.extension_methods),
        )


SEQUENCE_INTERFACE = "System.Collections.IEnumerable"
"""Every type implementing this can receive LINQ operators."""

GENERIC_SEQUENCE_INTERFACE = "System.Collections.Generic.IEnumerable"

ARRAY_TYPE = "System.Array"


def _static_type(full_name: str, *methods: str) -> ExternalType:
    return ExternalType(full_name=full_name, static_methods=frozenset(methods))


DEFAULT_TYPES: tuple[ExternalType, ...] = (
    # System.Linq
    ExternalType(
        full_name="System.Linq.Enumerable",
        static_methods=frozenset({"Range", "Repeat", "Empty"}),
        extension_methods=frozenset(_LINQ_OPERATORS),
    ),
    ExternalType(
        full_name="System.Linq.Queryable",
        extension_methods=frozenset(_LINQ_OPERATORS) - {"ToArray", "ToList", "ToDictionary"},
    ),
    # BCL receivers. Instance methods listed here win over LINQ operators of the same name
    ExternalType(full_name="System.Collections.IEnumerable", kind="interface"),
    ExternalType(
        full_name="System.Collections.Generic.IEnumerable",
        kind="interface",
        interfaces=("System.Collections.IEnumerable",),
    ),
    ExternalType(
        full_name="System.Collections.Generic.IReadOnlyCollection",
        kind="interface",
        interfaces=("System.Collections.Generic.IEnumerable",),
    ),
    ExternalType(
        full_name="System.Collections.Generic.IReadOnlyList",
        kind="interface",
        interfaces=("System.Collections.Generic.IReadOnlyCollection",),
    ),
    ExternalType(
        full_name="System.Collections.Generic.ICollection",
        kind="interface",
        interfaces=("System.Collections.Generic.IEnumerable",),
        methods=frozenset({"Add", "Clear", "Contains", "CopyTo", "Remove"}),
    ),
    ExternalType(
        full_name="System.Collections.Generic.IList",
        kind="interface",
        interfaces=("System.Collections.Generic.ICollection",),
        methods=frozenset({"IndexOf", "Insert", "RemoveAt"}),
    ),
    ExternalType(
        full_name="System.Array",
        interfaces=("System.Collections.Generic.IList",),
        methods=frozenset({"Clone", "CopyTo", "GetLength", "GetValue", "SetValue"}),
        # No Reverse here: arr.Reverse() is the LINQ operator
        static_methods=frozenset({"Copy", "Clear", "IndexOf", "Resize", "Sort", "Empty"}),
    ),
    ExternalType(
        full_name="System.String",
        interfaces=("System.Collections.Generic.IEnumerable",),
        methods=frozenset(
            {
                "Contains",
                "EndsWith",
                "Equals",
                "IndexOf",
                "LastIndexOf",
                "PadLeft",
                "Replace",
                "Split",
                "StartsWith",
                "Substring",
                "ToLower",
                "ToString",
                "ToUpper",
                "Trim",
            }
        ),
        static_methods=frozenset({"Concat", "Format", "IsNullOrEmpty", "IsNullOrWhiteSpace", "Join"}),
    ),
    ExternalType(
        full_name="System.Collections.Generic.List",
        interfaces=("System.Collections.Generic.IList", "System.Collections.Generic.IReadOnlyList"),
        methods=frozenset(
            {
                "Add",
                "AddRange",
                "BinarySearch",
                "Clear",
                "Contains",
                "Exists",
                "Find",
                "FindAll",
                "FindIndex",
                "ForEach",
                "IndexOf",
                "Insert",
                "Remove",
                "RemoveAll",
                "RemoveAt",
                "Reverse",
                "Sort",
                "ToArray",
                "TrueForAll",
            }
        ),
    ),
    ExternalType(
        full_name="System.Collections.Generic.Dictionary",
        interfaces=("System.Collections.Generic.ICollection",),
        methods=frozenset(
            {"Add", "Clear", "ContainsKey", "ContainsValue", "Remove", "TryAdd", "TryGetValue"}
        ),
    ),
    ExternalType(
        full_name="System.Collections.Generic.HashSet",
        interfaces=("System.Collections.Generic.ICollection",),
        methods=frozenset(
            {"Add", "Clear", "Contains", "ExceptWith", "IntersectWith", "Remove", "UnionWith"}
        ),
    ),
    ExternalType(
        full_name="System.Collections.Generic.Queue",
        interfaces=("System.Collections.Generic.IReadOnlyCollection",),
        methods=frozenset({"Clear", "Contains", "Dequeue", "Enqueue", "Peek", "TryDequeue"}),
    ),
    ExternalType(
        full_name="System.Collections.Generic.Stack",
        interfaces=("System.Collections.Generic.IReadOnlyCollection",),
        methods=frozenset({"Clear", "Contains", "Peek", "Pop", "Push", "TryPop"}),
    ),
    # UnityEngine object hierarchy
    ExternalType(
        full_name="UnityEngine.Object",
        methods=frozenset({"GetInstanceID", "ToString"}),
        static_methods=frozenset({"Destroy", "DestroyImmediate", "Instantiate", "FindObjectOfType"}),
    ),
    ExternalType(
        full_name="UnityEngine.Component",
        base_type="UnityEngine.Object",
        methods=frozenset(
            {"GetComponent", "GetComponents", "GetComponentInChildren", "CompareTag", "SendMessage"}
        ),
    ),
    ExternalType(
        full_name="UnityEngine.Behaviour",
        base_type="UnityEngine.Component",
    ),
    ExternalType(
        full_name="UnityEngine.MonoBehaviour",
        base_type="UnityEngine.Behaviour",
        methods=frozenset({"StartCoroutine", "StopCoroutine", "StopAllCoroutines", "Invoke"}),
    ),
    ExternalType(
        full_name="UnityEngine.ScriptableObject",
        base_type="UnityEngine.Object",
        static_methods=frozenset({"CreateInstance"}),
    ),
    _static_type("UnityEngine.Debug", "Log", "LogWarning", "LogError", "Assert"),
    # UnityEditor
    _static_type(
        "UnityEditor.AssetDatabase",
        "LoadAssetAtPath",
        "CreateAsset",
        "SaveAssets",
        "Refresh",
        "GetAssetPath",
        "FindAssets",
        "GUIDToAssetPath",
        "ImportAsset",
        "DeleteAsset",
    ),
    _static_type(
        "UnityEditor.EditorUtility",
        "SetDirty",
        "DisplayDialog",
        "DisplayProgressBar",
        "ClearProgressBar",
        "OpenFilePanel",
        "SaveFilePanel",
    ),
    _static_type("UnityEditor.EditorGUILayout", "LabelField", "PropertyField", "ObjectField"),
    _static_type("UnityEditor.EditorGUI", "LabelField", "PropertyField", "BeginChangeCheck"),
    _static_type("UnityEditor.EditorApplication", "ExecuteMenuItem", "Exit", "Beep"),
    _static_type("UnityEditor.Selection", "Contains"),
    _static_type("UnityEditor.Undo", "RecordObject", "RegisterCreatedObjectUndo"),
    _static_type("UnityEditor.PrefabUtility", "InstantiatePrefab", "SaveAsPrefabAsset"),
    _static_type("UnityEditor.EditorPrefs", "GetInt", "SetInt", "GetString", "SetString"),
    _static_type("UnityEditor.Handles", "DrawLine", "Label"),
    # NPOI
    ExternalType(
        full_name="NPOI.SS.UserModel.IWorkbook",
        kind="interface",
        methods=frozenset({"GetSheet", "GetSheetAt", "CreateSheet", "Write", "Close"}),
    ),
    ExternalType(
        full_name="NPOI.SS.UserModel.ISheet",
        kind="interface",
        methods=frozenset({"GetRow", "CreateRow"}),
    ),
    ExternalType(
        full_name="NPOI.SS.UserModel.IRow",
        kind="interface",
        methods=frozenset({"GetCell", "CreateCell"}),
    ),
    ExternalType(
        full_name="NPOI.SS.UserModel.ICell",
        kind="interface",
        methods=frozenset({"SetCellValue", "ToString"}),
    ),
    _static_type("NPOI.SS.UserModel.WorkbookFactory", "Create"),
    ExternalType(
        full_name="NPOI.HSSF.UserModel.HSSFWorkbook",
        interfaces=("NPOI.SS.UserModel.IWorkbook",),
        methods=frozenset({"GetSheet", "GetSheetAt", "CreateSheet", "Write", "Close"}),
    ),
    ExternalType(
        full_name="NPOI.XSSF.UserModel.XSSFWorkbook",
        interfaces=("NPOI.SS.UserModel.IWorkbook",),
        methods=frozenset({"GetSheet", "GetSheetAt", "CreateSheet", "Write", "Close"}),
    ),
    _static_type("NPOI.SS.Util.CellRangeAddress", "ValueOf"),
    _static_type("NPOI.SS.Util.CellReference", "ConvertNumToColString"),
)


@dataclass
class SymbolCatalog:
    """External types keyed by fully-qualified name."""

    types: dict[str, ExternalType] = field(default_factory=dict)

    @classmethod
    def default(cls) -> SymbolCatalog:
        return cls(types={t.full_name: t for t in DEFAULT_TYPES})

    @classmethod
    def from_config(cls, config: CatalogConfig | None = None) -> SymbolCatalog:
        """Built-in types with configured entries merged over them."""
        catalog = cls.default()
        if config is not None:
            for full_name, entry in config.types.items():
                catalog.types[full_name] = ExternalType.from_config(full_name, entry)
        return catalog

    def get(self, full_name: str) -> ExternalType | None:
        return self.types.get(full_name)

    def __contains__(self, full_name: object) -> bool:
        return full_name in self.types

    def extension_hosts(self, namespaces: set[str], method_name: str) -> list[ExternalType]:
        """Types in ``namespaces`` that declare extension method ``method_name``."""
        return [
            t
            for t in self.types.values()
            if method_name in t.extension_methods and t.full_name.rpartition(".")[0] in namespaces
        ]
