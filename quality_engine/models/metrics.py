"""Raw metric models.

Already-extracted measurements for one contract version. The engine
validates their shape but never recomputes them.

Rules Applied:
    - Pydantic Modeling: frozen=True, bounds declared with Field
"""

from pydantic import BaseModel, ConfigDict, Field


class CodeMetrics(BaseModel):
    """Static source code metrics.

    Attributes:
        lines_of_code: Non-blank, non-comment source lines
        blank_lines: Blank lines
        comment_lines: Comment lines
        cyclomatic_complexity: Average cyclomatic complexity per function
        max_function_complexity: Complexity of the worst single function
        function_count: Number of functions
        avg_function_length: Average lines per function
        deeply_nested_count: Blocks nested more than 3 levels
    """

    model_config = ConfigDict(frozen=True)

    lines_of_code: int = Field(default=0, ge=0)
    blank_lines: int = Field(default=0, ge=0)
    comment_lines: int = Field(default=0, ge=0)
    cyclomatic_complexity: float = Field(default=0.0, ge=0)
    max_function_complexity: int = Field(default=0, ge=0)
    function_count: int = Field(default=0, ge=0)
    avg_function_length: float = Field(default=0.0, ge=0)
    deeply_nested_count: int = Field(default=0, ge=0)


class TestMetrics(BaseModel):
    """Test suite metrics. Coverage values are fractions in [0, 1].

    Attributes:
        test_count: Number of tests
        test_lines: Lines of test code
        line_coverage: Fraction of lines covered
        function_coverage: Fraction of functions covered by at least one test
        branch_coverage: Fraction of branches covered
        test_to_code_ratio: Test lines / source lines
        has_integration_tests: Integration tests present
        has_property_tests: Property-based tests present
    """

    __test__ = False  # not a pytest test class

    model_config = ConfigDict(frozen=True)

    test_count: int = Field(default=0, ge=0)
    test_lines: int = Field(default=0, ge=0)
    line_coverage: float = Field(default=0.0, ge=0, le=1)
    function_coverage: float = Field(default=0.0, ge=0, le=1)
    branch_coverage: float = Field(default=0.0, ge=0, le=1)
    test_to_code_ratio: float = Field(default=0.0, ge=0)
    has_integration_tests: bool = False
    has_property_tests: bool = False


class DocMetrics(BaseModel):
    """Documentation metrics.

    Attributes:
        public_fn_doc_coverage: Fraction of public functions with a doc comment
        type_doc_coverage: Fraction of public types with a doc comment
        has_readme: README present
        has_changelog: CHANGELOG present
        has_license: LICENSE present
        example_count: Number of usage examples
    """

    model_config = ConfigDict(frozen=True)

    public_fn_doc_coverage: float = Field(default=0.0, ge=0, le=1)
    type_doc_coverage: float = Field(default=0.0, ge=0, le=1)
    has_readme: bool = False
    has_changelog: bool = False
    has_license: bool = False
    example_count: int = Field(default=0, ge=0)


class SecurityMetrics(BaseModel):
    """Security metrics derived from an audit.

    Finding counts are unresolved findings by severity.
    """

    model_config = ConfigDict(frozen=True)

    audit_score: float = Field(default=0.0, ge=0, le=100)
    critical_findings: int = Field(default=0, ge=0)
    high_findings: int = Field(default=0, ge=0)
    medium_findings: int = Field(default=0, ge=0)
    low_findings: int = Field(default=0, ge=0)
    is_verified: bool = False
    has_formal_audit: bool = False


class MetricSnapshot(BaseModel):
    """The four raw metric sets for one contract version, supplied wholesale."""

    model_config = ConfigDict(frozen=True)

    code: CodeMetrics = Field(default_factory=CodeMetrics)
    tests: TestMetrics = Field(default_factory=TestMetrics)
    docs: DocMetrics = Field(default_factory=DocMetrics)
    security: SecurityMetrics = Field(default_factory=SecurityMetrics)
