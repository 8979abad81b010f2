"""Suggester 프롬프트 템플릿(Suggester prompt templates)."""
from __future__ import annotations

SUGGEST_PROMPT_TEMPLATE = """
You are writing a public advisory for a vulnerability in a Go module.

Write a one-line summary and a short description for the vulnerability below.

Writing guidelines:
- Summary: at most 100 characters, no trailing period, of the form "<problem> in <package>"
- Description: one or two short paragraphs in plain prose, present tense, no markdown
- Do not invent affected versions, fixes or references that are not given
- Do not mention the CVE or GHSA ids

Affected packages:
{packages}

Current summary:
{summary}

Current description:
{description}

References:
{references}

Output format (JSON only, no other text):
{{"summary": "...", "description": "..."}}
"""
