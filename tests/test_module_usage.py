"""Integration tests for ModuleUsage construction against real module fixtures."""

import pytest
from pathlib import Path
from tfusage.analyzer.errors import LoadError, ParseError
from tfusage.analyzer.extractor import ModuleSource
from tfusage.analyzer.module_usage import ModuleUsage


FIXTURES_DIR = Path(__file__).parent / 'fixtures' / 'modules'


@pytest.fixture
def network():
    return ModuleUsage.from_path(FIXTURES_DIR / 'network')


class TestNetworkModule:
    """network/ spreads declarations over variables.tf, main.tf and outputs.tf."""

    def test_path(self, network):
        assert network.path == str(FIXTURES_DIR / 'network')

    def test_variables(self, network):
        # var.region_id must not count as a use of var.region
        assert network.variables == {'region': 1, 'region_id': 1, 'unused_cidr': 0}

    def test_locals_reference_each_other(self, network):
        assert network.locals == {'base_tags': 1, 'tags': 1, 'other_tag': 1}

    def test_modules_loose_prefix_match(self, network):
        # module.vpc also matches inside module.vpc_endpoints
        assert network.modules == {'vpc': 2, 'vpc_endpoints': 1}

    def test_data_lookups(self, network):
        assert network.data_lookups == {
            'data.aws_ami.ubuntu': 1,
            'data.aws_caller_identity.current': 0,
        }

    def test_module_sources(self, network):
        assert network.module_sources == {
            'vpc': ModuleSource('git::https://example.com/vpc.git', '1.2.3'),
            'vpc_endpoints': ModuleSource('./modules/endpoints', ''),
        }

    def test_child_module_directory_not_included(self, network):
        assert 'service_names' not in network.variables

    def test_non_terraform_files_ignored(self, network):
        # README.md mentions var.unused_cidr
        assert network.variables['unused_cidr'] == 0

    def test_no_duplicates(self, network):
        assert network.duplicates == []

    def test_unused_count(self, network):
        assert network.unused_count() == 2


def test_strict_module_refs():
    usage = ModuleUsage.from_path(FIXTURES_DIR / 'network', strict_module_refs=True)
    assert usage.modules == {'vpc': 1, 'vpc_endpoints': 1}


def test_locals_example():
    usage = ModuleUsage.from_path(FIXTURES_DIR / 'locals_example')

    assert usage.locals == {'dummy': 0, 'tags': 1}
    assert usage.variables == {}
    assert usage.modules == {}
    assert usage.data_lookups == {}


def test_all_variables_unused():
    source = '\n'.join(f'variable "v{i}" {{}}' for i in range(5)) + '\n'
    usage = ModuleUsage.from_source(source)

    assert len(usage.variables) == 5
    assert set(usage.variables.values()) == {0}


def test_duplicate_module_declaration_keeps_one_entry():
    source = '''
module "test" {
  source = "./one"
}

module "test" {
  source = "./two"
}

output "x" {
  value = module.test.id
}
'''
    usage = ModuleUsage.from_source(source)

    assert usage.modules == {'test': 1}
    assert usage.module_sources['test'] == ModuleSource('./two', '')
    assert usage.duplicates == ['module.test']


def test_blocks_missing_labels_are_skipped():
    usage = ModuleUsage.from_source('data "only_type" {}\nvariable "ok" {}\n')

    assert usage.data_lookups == {}
    assert usage.variables == {'ok': 0}


def test_empty_directory(tmp_path):
    usage = ModuleUsage.from_path(tmp_path)

    assert usage.variables == {}
    assert usage.locals == {}


def test_parse_error_names_module():
    broken = FIXTURES_DIR / 'broken'
    with pytest.raises(ParseError) as exc_info:
        ModuleUsage.from_path(broken)
    assert str(broken) in str(exc_info.value)


def test_missing_directory(tmp_path):
    with pytest.raises(LoadError):
        ModuleUsage.from_path(tmp_path / 'does-not-exist')


def test_custom_extension(tmp_path):
    (tmp_path / 'main.hcl').write_text('variable "a" {}\n')
    (tmp_path / 'main.tf').write_text('variable "b" {}\n')

    usage = ModuleUsage.from_path(tmp_path, extension='.hcl')

    assert usage.variables == {'a': 0}
