"""Tests for the symbol router."""

import logging

import pytest

from cxxmodgen.codegen.records import DeclKind, Linkage
from cxxmodgen.codegen.router import RouteOutcome, SymbolRouter, reexport_statement
from cxxmodgen.codegen.tree import NamespaceTree
from cxxmodgen.config import InternalLinkageMode
from cxxmodgen.exceptions import RecordError

from .fixtures import make_record


def make_router(**kwargs):
    diagnostics = []
    kwargs.setdefault('diagnostic', diagnostics.append)
    router = SymbolRouter(NamespaceTree(), NamespaceTree(), **kwargs)
    return router, diagnostics


class TestReexportStatement:
    @pytest.mark.parametrize('kind', list(DeclKind))
    def test_every_kind_uses_a_using_declaration(self, kind):
        record = make_record('ns::thing', kind=kind)
        assert reexport_statement(record) == 'using ::ns::thing;'

    def test_global_symbol(self):
        assert reexport_statement(make_record('x')) == 'using ::x;'

    def test_anonymous_scope_is_removed_from_reference(self):
        record = make_record('(anonymous namespace)::foo')
        assert reexport_statement(record) == 'using ::foo;'

    def test_template_specialization_names_the_template(self):
        record = make_record('std::hash<ns::Foo>', kind=DeclKind.TEMPLATE_ENTITY)
        assert reexport_statement(record) == 'using ::std::hash;'

    def test_template_arguments_kept_for_other_kinds(self):
        record = make_record('ns::Box<int>::value', kind=DeclKind.VARIABLE)
        assert reexport_statement(record) == 'using ::ns::Box<int>::value;'

    def test_template_specialization_is_placed_in_its_namespace(self):
        router, _ = make_router()

        router.route(
            make_record('std::hash<ns::Foo>', kind=DeclKind.TEMPLATE_ENTITY)
        )

        assert router.exported_tree.serialize(use_export_prefix=True) == (
            'namespace std {\nexport using ::std::hash;\n}  // namespace std\n'
        )


class TestRouting:
    """Tests for the routing decisions."""

    def test_external_record_is_exported(self):
        router, _ = make_router()

        outcome = router.route(make_record('ns::f'))

        assert outcome is RouteOutcome.EXPORTED
        assert router.exported_tree.get_node(['ns']).statements == {
            'using ::ns::f;'
        }
        assert router.internal_tree.is_empty()

    def test_implicit_record_is_rejected(self):
        router, _ = make_router()

        outcome = router.route(make_record('ns::S::S', is_implicit=True))

        assert outcome is RouteOutcome.IMPLICIT
        assert router.exported_tree.is_empty()

    def test_implicit_check_comes_before_linkage(self):
        router, diagnostics = make_router()

        outcome = router.route(
            make_record('ns::f', linkage=Linkage.INTERNAL, is_implicit=True)
        )

        assert outcome is RouteOutcome.IMPLICIT
        assert diagnostics == []

    def test_filter_rejects_non_matching_names(self):
        router, _ = make_router(filter='lib::')

        assert router.route(make_record('other::f')) is RouteOutcome.FILTERED
        assert router.route(make_record('lib::f')) is RouteOutcome.EXPORTED
        assert router.exported_tree.count_statements() == 1

    def test_filter_is_substring_containment(self):
        """Test that the filter matches anywhere in the qualified name."""
        router, _ = make_router(filter='Foo')

        assert router.route(make_record('ns::FooBar::x')) is RouteOutcome.EXPORTED
        assert router.route(make_record('myFoo')) is RouteOutcome.EXPORTED
        assert router.route(make_record('ns::Bar::x')) is RouteOutcome.FILTERED

    def test_empty_filter_matches_everything(self):
        router, _ = make_router(filter='')
        assert router.matches_filter('anything::at::all')

    def test_filter_is_idempotent(self):
        """Test that filtering an already-routed set again changes nothing."""
        names = ['lib::a', 'other::b', 'lib::detail::c', 'x', 'mylib::d']
        router, _ = make_router(filter='lib')
        routed = [
            name
            for name in names
            if router.route(make_record(name)) is RouteOutcome.EXPORTED
        ]

        second, _ = make_router(filter='lib')
        rerouted = [
            name
            for name in routed
            if second.route(make_record(name)) is RouteOutcome.EXPORTED
        ]

        assert rerouted == routed
        assert second.exported_tree.serialize() == router.exported_tree.serialize()

    def test_redeclaration_is_ignored(self):
        router, _ = make_router()

        outcome = router.route(make_record('ns::f', is_first_declaration=False))

        assert outcome is RouteOutcome.REDECLARATION
        assert router.exported_tree.is_empty()

    def test_redeclaration_after_first_declaration_adds_nothing(self):
        router, _ = make_router()
        router.route(make_record('ns::f'))

        router.route(
            make_record(
                'ns::f',
                linkage=Linkage.INTERNAL,
                is_first_declaration=False,
                raw_text='void f() {}',
            )
        )

        assert router.exported_tree.count_statements() == 1
        assert router.internal_tree.is_empty()

    def test_overloads_collapse_into_one_statement(self):
        router, _ = make_router()

        assert router.route(make_record('ns::f')) is RouteOutcome.EXPORTED
        assert router.route(make_record('ns::f')) is RouteOutcome.DUPLICATE
        assert router.exported_tree.count_statements() == 1

    def test_anonymous_scope_is_hoisted(self):
        router, _ = make_router()

        router.route(make_record('::(anonymous)::foo'))

        assert router.exported_tree.statements == {'using ::foo;'}
        assert router.exported_tree.children == {}

    def test_unusable_name_raises(self):
        router, _ = make_router()
        with pytest.raises(RecordError):
            router.route(make_record('(anonymous namespace)'))


class TestInternalLinkage:
    """Tests for records with internal linkage."""

    def test_skip_mode_emits_one_diagnostic(self):
        router, diagnostics = make_router(internal_linkage=InternalLinkageMode.SKIP)

        outcome = router.route(make_record('ns::helper', linkage=Linkage.INTERNAL))

        assert outcome is RouteOutcome.SKIPPED_INTERNAL
        assert diagnostics == ['ns::helper has internal linkage. Skipping.']
        assert router.exported_tree.is_empty()
        assert router.internal_tree.is_empty()

    def test_skip_mode_logs_warning_by_default(self, caplog):
        caplog.set_level(logging.WARNING, logger='cxxmodgen')
        router = SymbolRouter(NamespaceTree(), NamespaceTree())

        router.route(make_record('ns::helper', linkage=Linkage.INTERNAL))

        messages = [
            r.getMessage() for r in caplog.records if r.levelno == logging.WARNING
        ]
        assert messages == ['ns::helper has internal linkage. Skipping.']

    def test_header_mode_inserts_raw_text(self):
        router, diagnostics = make_router(internal_linkage=InternalLinkageMode.HEADER)
        text = 'static int counter = 0;'

        outcome = router.route(
            make_record(
                'ns::detail::counter',
                kind=DeclKind.VARIABLE,
                linkage=Linkage.INTERNAL,
                raw_text=text,
            )
        )

        assert outcome is RouteOutcome.INTERNAL
        assert router.internal_tree.get_node(['ns', 'detail']).statements == {text}
        assert router.exported_tree.is_empty()
        assert diagnostics == []

    def test_header_mode_requires_raw_text(self):
        router, _ = make_router(internal_linkage=InternalLinkageMode.HEADER)
        with pytest.raises(RecordError, match='ns::helper'):
            router.route(make_record('ns::helper', linkage=Linkage.INTERNAL))

    def test_header_mode_still_exports_external_records(self):
        router, _ = make_router(internal_linkage=InternalLinkageMode.HEADER)
        router.route(make_record('ns::f'))
        assert router.exported_tree.count_statements() == 1
        assert router.internal_tree.is_empty()


class TestStats:
    def test_outcomes_are_counted(self):
        router, _ = make_router(filter='ns')
        router.route(make_record('ns::a'))
        router.route(make_record('ns::b'))
        router.route(make_record('other::c'))
        router.route(make_record('ns::d', is_implicit=True))
        router.route(make_record('ns::e', linkage=Linkage.INTERNAL))

        assert router.stats[RouteOutcome.EXPORTED] == 2
        assert router.stats[RouteOutcome.FILTERED] == 1
        assert router.stats[RouteOutcome.IMPLICIT] == 1
        assert router.stats[RouteOutcome.SKIPPED_INTERNAL] == 1
        assert router.stats[RouteOutcome.INTERNAL] == 0
