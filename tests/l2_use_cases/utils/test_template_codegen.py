"""Tests for the template compiler."""

from __future__ import annotations

import pytest

from script_template_loader.l1_entities.environment import Environment
from script_template_loader.l1_entities.errors import CompileError, TemplateRuntimeError
from script_template_loader.l2_use_cases.utils.template_codegen import ENTRY_POINT, generate_program


def render(compiler, source: str, **bindings) -> str:
    return compiler.compile_and_render(source, Environment(bindings))


class TestLiterals:
    def test_plain_text_round_trips(self, compiler):
        assert render(compiler, 'mov eax,[rcx+10]\n') == 'mov eax,[rcx+10]\n'

    def test_empty_source_renders_empty(self, compiler):
        assert render(compiler, '') == ''

    def test_quote_sequences_round_trip(self, compiler):
        source = 'a \'\'\' b """ c ]] d ]=] e \\n f'
        assert render(compiler, source) == source

    def test_single_angle_and_percent_are_literal(self, compiler):
        source = 'cmp eax,<5 % 2> > 1'
        assert render(compiler, source) == source


class TestOutputTags:
    def test_expression_is_stringified(self, compiler):
        assert render(compiler, '<< 1 + 2 >>') == '3'

    def test_binding_is_substituted(self, compiler):
        assert render(compiler, 'alloc(<<HookName>>)', HookName='newmem') == 'alloc(newmem)'

    def test_missing_name_renders_empty(self, compiler):
        assert render(compiler, '[<<missing>>]') == '[]'

    def test_none_renders_empty(self, compiler):
        assert render(compiler, '<<value>>', value=None) == ''

    def test_trailing_comment_in_expression(self, compiler):
        assert render(compiler, '<< 7 # seven >>') == '7'

    def test_empty_output_tag_raises(self, compiler):
        with pytest.raises(CompileError):
            render(compiler, 'x <<  >> y')

    def test_ambient_helpers_are_callable(self, compiler):
        env = Environment({'raw': '8b4110'}, ambient={'upper': str.upper})
        assert compiler.compile_and_render('<< upper(raw) >>', env) == '8B4110'


class TestCodeTags:
    def test_loop_renders_each_iteration(self, compiler):
        assert render(compiler, '<% for i in range(1, 4): %><<i>><% end %>') == '123'

    def test_if_else(self, compiler):
        source = '<% if flag: %>yes<% else: %>no<% end %>'
        assert render(compiler, source, flag=True) == 'yes'
        assert render(compiler, source, flag=False) == 'no'

    def test_elif_chain(self, compiler):
        source = '<% if n == 1: %>one<% elif n == 2: %>two<% else: %>many<% end %>'
        assert render(compiler, source, n=2) == 'two'
        assert render(compiler, source, n=5) == 'many'

    def test_nested_blocks(self, compiler):
        source = '<% for i in range(3): %><% if i % 2 == 0: %><<i>>,<% end %><% end %>'
        assert render(compiler, source) == '0,2,'

    def test_empty_block_body(self, compiler):
        assert render(compiler, '<% if True: %><% end %>ok') == 'ok'

    def test_multiline_code_tag_keeps_relative_indent(self, compiler):
        source = '<%\nfor i in range(2):\n    x = i * 10\n%><<x>>'
        assert render(compiler, source) == '10'

    def test_multiline_code_tag_indents_against_first_line_column(self, compiler):
        source = '<% for i in range(2):\n       x = i * 10 %><<x>>'
        assert render(compiler, source) == '10'

    def test_multiline_code_tag_after_leading_text(self, compiler):
        source = '  <% if flag:\n         y = 1\n     %><<y>>'
        assert render(compiler, source, flag=True) == '  1'

    def test_multiline_code_tag_aligned_with_first_line_opens_block(self, compiler):
        assert render(compiler, '<% x = 3\n   if x > 2: %>big<% end %>') == 'big'

    def test_multiline_code_tag_left_of_first_line(self, compiler):
        assert render(compiler, '<% x = 1\ny = 2 %><<x + y>>') == '3'

    def test_comment_ending_in_colon_opens_no_block(self, compiler):
        assert render(compiler, '<% x = 1  # step 1: %><<x>>') == '1'

    def test_quote_in_comment_after_block_opener(self, compiler):
        source = "<% if flag:  # don't skip %>yes<% end %>"
        assert render(compiler, source, flag=True) == 'yes'
        assert render(compiler, source, flag=False) == ''

    def test_colon_inside_string_opens_no_block(self, compiler):
        assert render(compiler, "<% label = 'key:' %><<label>>") == 'key:'

    def test_code_tag_emits_nothing_itself(self, compiler):
        assert render(compiler, 'a<% y = 2 %>b<<y>>') == 'ab2'

    def test_try_except(self, compiler):
        source = '<% try: %><< 1 // zero >><% except ZeroDivisionError: %>div<% end %>'
        assert render(compiler, source, zero=0) == 'div'

    def test_bindings_do_not_leak_between_renders(self, compiler):
        env = Environment({'a': 1})
        compiler.compile_and_render('<% b = 2 %>', env)
        assert 'b' not in env
        assert ENTRY_POINT not in env

    def test_plain_mapping_is_accepted(self, compiler):
        assert compiler.compile_and_render('<<a>><<b>>', {'a': 'x'}) == 'x'


class TestMalformedTemplates:
    def test_unterminated_output_tag(self, compiler):
        with pytest.raises(CompileError) as exc:
            render(compiler, 'a\nb\n<< x')
        assert exc.value.line == 3

    def test_unterminated_code_tag(self, compiler):
        with pytest.raises(CompileError):
            render(compiler, '<% for i in range(3):')

    def test_open_marker_is_not_its_own_close(self, compiler):
        with pytest.raises(CompileError):
            render(compiler, '<%>')

    def test_end_without_block(self, compiler):
        with pytest.raises(CompileError) as exc:
            render(compiler, 'x\n<% end %>')
        assert exc.value.line == 2

    def test_unclosed_block(self, compiler):
        with pytest.raises(CompileError) as exc:
            render(compiler, 'line1\n<% if True: %>x')
        assert exc.value.line == 2

    def test_invalid_python_is_compile_error(self, compiler):
        with pytest.raises(CompileError) as exc:
            render(compiler, '<% if %>')
        assert not isinstance(exc.value, TemplateRuntimeError)

    def test_runtime_failure_reports_template_line(self, compiler):
        with pytest.raises(TemplateRuntimeError) as exc:
            render(compiler, 'first\n<< 1 / 0 >>')
        assert exc.value.line == 2
        assert isinstance(exc.value.__cause__, ZeroDivisionError)


class TestGenerateProgram:
    def test_program_defines_entry_point(self):
        program = generate_program('a<<b>>')
        assert program.source.startswith(f'def {ENTRY_POINT}():')
        assert "return ''.join(_out)" in program.source

    def test_origins_cover_every_generated_line(self):
        program = generate_program('a\n<<b>>\n<% if c: %>d<% end %>')
        assert len(program.origins) == program.source.count('\n')
        assert program.template_line(None) is None
        assert program.template_line(10_000) is None
