"""Tests for the tree-sitter HCL block parser."""

import pytest
from tfusage.analyzer.errors import ParseError
from tfusage.analyzer.parser import HCLParser


@pytest.fixture
def parser():
    return HCLParser()


def test_blocks_in_source_order(parser):
    source = b'''
terraform {
  required_version = ">= 1.5"
}

variable "region" {}

data "aws_ami" "ubuntu" {
  most_recent = true
}

module "vpc" {
  source = "./vpc"
}
'''
    blocks = parser.parse_blocks(source)

    assert [b.type for b in blocks] == ['terraform', 'variable', 'data', 'module']
    assert blocks[0].labels == []
    assert blocks[1].labels == ['region']
    assert blocks[2].labels == ['aws_ami', 'ubuntu']
    assert blocks[3].labels == ['vpc']


def test_locals_attributes(parser):
    source = b'''
locals {
  # comment lines are not attributes
  name   = "app"
  tags   = { Name = local.name }
  nested = [for s in var.subnets : s.id]
}
'''
    [block] = parser.parse_blocks(source)

    assert block.type == 'locals'
    assert list(block.attributes()) == ['name', 'tags', 'nested']


def test_nested_blocks_are_not_attributes(parser):
    source = b'''
resource "aws_security_group" "web" {
  name = "web"

  ingress {
    from_port = 443
  }
}
'''
    [block] = parser.parse_blocks(source)

    assert block.labels == ['aws_security_group', 'web']
    assert list(block.attributes()) == ['name']
    assert block.attribute('ingress') is None


def test_empty_block_has_no_attributes(parser):
    [block] = parser.parse_blocks(b'locals {}\n')

    assert block.body is None
    assert block.attributes() == {}


def test_empty_source(parser):
    assert parser.parse_blocks(b'') == []
    assert parser.parse_blocks(b'\n\n') == []


def test_invalid_source_raises_parse_error(parser):
    with pytest.raises(ParseError) as exc_info:
        parser.parse_blocks(b'variable "x" {\n  type = string\n', path='modules/broken')

    err = exc_info.value
    assert err.path == 'modules/broken'
    assert err.line is not None
    assert 'modules/broken' in str(err)


def test_garbage_raises_parse_error(parser):
    with pytest.raises(ParseError):
        parser.parse_blocks(b'this is = = not hcl {{{')
