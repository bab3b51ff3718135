"""Heuristic programming-language detection for clipboard text.

Text is scored on four independent signals: keyword density, a penalty for
natural-language prose, structural punctuation, and per-language idiom
rules. All tables are module-level constants and ``detect_language`` keeps
no state, so it is safe to call from any thread.
"""

import re
from typing import Callable, Dict, FrozenSet, NamedTuple, Optional, Tuple

MIN_LENGTH = 15
MIN_CODE_SCORE = 6

COMMON_TEXT_WORDS: FrozenSet[str] = frozenset((
    "the", "and", "that", "have", "for", "not", "with", "you", "this", "but",
    "his", "from", "they", "say", "her", "she", "will", "one", "all", "would",
    "there", "their", "what", "about", "who", "get", "which", "go", "me", "when",
    "make", "can", "like", "time", "just", "him", "know", "take", "people", "into",
    "year", "your", "good", "some", "could", "them", "see", "other", "than", "then",
    "now", "look", "only", "come", "its", "over", "think", "also", "back", "after",
    "use", "two", "how", "our", "work", "first", "well", "way", "even", "new",
    "want", "because", "any", "these", "give", "day", "most", "us", "is", "are",
    "was", "were", "been", "has", "had", "does", "did", "be", "being", "should",
))

CODE_TOKENS: FrozenSet[str] = frozenset((
    "public", "private", "protected", "static", "final", "void", "int", "float",
    "double", "boolean", "char", "String", "if", "else", "for", "while", "do",
    "switch", "case", "default", "break", "continue", "return", "class", "interface",
    "extends", "implements", "package", "import", "throws", "throw", "try", "catch",
    "finally", "synchronized", "volatile", "transient", "native", "strictfp", "enum",
    "assert", "new", "this", "super", "instanceof", "null", "true", "false",
    "def", "elif", "lambda", "yield", "with", "async", "await", "self", "None",
    "function", "const", "let", "var", "export", "require", "module", "undefined",
    "namespace", "using", "foreach", "override", "virtual", "nullptr", "sizeof",
    "struct", "typedef", "union", "unsigned", "signed", "extern", "inline",
    "template", "typename", "pub", "fn", "mut", "impl", "trait", "where",
    "type", "func", "chan", "defer", "go", "select", "val", "fun", "lateinit",
    "suspend", "companion", "data", "guard", "extension", "protocol", "init",
))

_TOKEN_SPLIT = re.compile(r"[\s\W]+")
_NON_LETTERS = re.compile(r"[^a-zA-Z]")
_SENTENCE = re.compile(r"[A-Z][a-z]+\s+[a-z]+\s+[a-z]+[.?!]")
_CSS_RULE = re.compile(r"[a-zA-Z0-9_-]\s*\{\s*[a-zA-Z-]+\s*:\s*[^;]+;")


class Sample(NamedTuple):
    text: str
    lower: str
    upper: str

    @classmethod
    def of(cls, text: str) -> "Sample":
        return cls(text, text.lower(), text.upper())


Predicate = Callable[[Sample], bool]
Rule = Tuple[int, Predicate]


def _has(*needles: str, view: str = "text") -> Predicate:
    """True when any needle occurs in the chosen view of the sample."""
    def check(sample: Sample) -> bool:
        haystack = getattr(sample, view)
        return any(needle in haystack for needle in needles)
    return check


def _has_all(*needles: str, view: str = "text") -> Predicate:
    def check(sample: Sample) -> bool:
        haystack = getattr(sample, view)
        return all(needle in haystack for needle in needles)
    return check


def _lacks(*needles: str) -> Predicate:
    def check(sample: Sample) -> bool:
        return not any(needle in sample.text for needle in needles)
    return check


def _starts(*prefixes: str) -> Predicate:
    def check(sample: Sample) -> bool:
        return sample.text.startswith(prefixes)
    return check


def _both(*predicates: Predicate) -> Predicate:
    def check(sample: Sample) -> bool:
        return all(predicate(sample) for predicate in predicates)
    return check


def _either(*predicates: Predicate) -> Predicate:
    def check(sample: Sample) -> bool:
        return any(predicate(sample) for predicate in predicates)
    return check


def _css_rule_block(sample: Sample) -> bool:
    return sample.text.endswith("}") and _CSS_RULE.search(sample.text) is not None


def _upper(*needles: str) -> Predicate:
    return _has(*needles, view="upper")


def _lower(*needles: str) -> Predicate:
    return _has(*needles, view="lower")


# Evaluation order is fixed; on a tie the language listed first wins.
LANGUAGE_RULES: Tuple[Tuple[str, Tuple[Rule, ...]], ...] = (
    ("Java", (
        (5, _has("public class ")),
        (6, _has("public static void main")),
        (4, _has("System.out.print")),
        (4, _has("@Override", "@Test")),
        (3, _has_all("package ", ";")),
        (3, _has("import java.", "import static ")),
        (3, _has("ArrayList<", "HashMap<")),
        (3, _has("private final ", "protected void ")),
        (3, _either(_has("throws Exception"), _has_all("try {", "catch ("))),
        (2, _has("implements Serializable", "extends ")),
        (2, _has("StringBuilder", "StringBuffer")),
        (4, _has_all("Stream.", ".collect")),
        (3, _has("Collectors.", "Optional.")),
        (2, _has("Iterator ", "Iterable ")),
        (3, _has("Thread.sleep", "Runnable ")),
    )),
    ("Python", (
        (5, _has_all("def ", "):")),
        (7, _has('if __name__ == "__main__":')),
        (4, _both(_has("import "), _has("as ", "from "))),
        (5, _has_all("self.", "def ")),
        (4, _has("elif ", "lambda ")),
        (4, _has("async def ", "await ")),
        (2, _has("range(", "enumerate(")),
        (5, _has("__init__", "__str__")),
        (4, _has_all("try:", "except ")),
        (2, _both(_has(":"), _has("    ", "\t"))),
        (4, _has("with open(", "pip install ")),
        (4, _has("@staticmethod", "@classmethod")),
        (5, _has("super().__init__")),
        (2, _has("import os", "import sys")),
        (3, _has('print(f"')),
    )),
    ("JavaScript", (
        (3, _has_all("function ", "{")),
        (4, _has("console.log(")),
        (4, _both(_has("=>"), _has("const", "("))),
        (5, _has("export default", "import {", "import React")),
        (6, _has("useEffect(", "useState(", "useContext(")),
        (5, _has("document.getElementById", "window.addEventListener")),
        (3, _has("JSON.stringify(", "JSON.parse(")),
        (5, _has_all("require('", "module.exports")),
        (3, _has_all("async ", "await ")),
        (2, _has("window.", "localStorage.")),
        (4, _has("fetch(", "axios.")),
        (4, _has("Promise.all(", ".then(")),
        (2, _has(".catch(", ".finally(")),
        (2, _has("typeof ", "instanceof ")),
        (1, _has("undefined", "null")),
    )),
    ("C++", (
        (6, _has_all("#include <", ">")),
        (5, _both(_has("std::"), _has("cout", "endl", "vector"))),
        (7, _has("using namespace std;")),
        (4, _has("public:", "private:", "protected:")),
        (5, _has("template<typename", "template <class")),
        (5, _has_all("virtual ", " = 0;")),
        (5, _has("dynamic_cast<", "static_cast<")),
        (3, _has("nullptr")),
        (3, _has("std::string", "std::vector")),
        (3, _has("std::map", "std::unordered_map")),
        (5, _has("std::unique_ptr", "std::shared_ptr")),
        (6, _has("#pragma once")),
        (4, _both(_has("operator"), _has("==", "<<"))),
        (5, _has("reinterpret_cast<", "const_cast<")),
        (3, _has("inline ", 'extern "C"')),
    )),
    ("C", (
        (6, _has("#include <stdio.h>", "#include <stdlib.h>")),
        (4, _has("malloc(", "free(", "sizeof(")),
        (3, _both(_has('printf("'), _lacks("System."))),
        (2, _has_all("struct ", "{")),
        (5, _has("typedef struct")),
        (7, _has("int main(int argc")),
        (3, _both(_has_all("#define ", " "), _lacks("\n"))),
        (5, _has("#include <string.h>", "#include <errno.h>")),
        (4, _has("fprintf(stderr")),
        (3, _has("void*", "char*")),
        (3, _has("unsigned char", "long long")),
        (3, _has("volatile ", "restrict ")),
        (4, _has_all("goto ", ":")),
        (4, _has("uint32_t", "int64_t")),
        (5, _has_all("#ifndef ", "#define ", "#endif")),
    )),
    ("C#", (
        (5, _has("using System;", "using Microsoft.")),
        (5, _has("Console.WriteLine(")),
        (3, _has_all("namespace ", "{")),
        (7, _has_all("public class ", "{ get; set; }")),
        (4, _has("foreach(var ", "Task.Run(")),
        (4, _has_all("await ", "async Task")),
        (5, _has("[HttpGet]", "[HttpPost]")),
        (3, _has("List<", "Dictionary<")),
        (4, _has("IEnumerable<", "IQueryable<")),
        (3, _has("lock(", "using (")),
        (2, _has_all("var ", " = new ")),
        (4, _has("delegate ", "event ")),
        (4, _has("sealed class", "partial class")),
        (4, _has("Console.ReadLine()")),
        (5, _has("yield return ")),
    )),
    ("HTML", (
        (6, _has("<!DOCTYPE html>", "<html")),
        (3, _has("</div>", "</span>", "</p>")),
        (4, _has("<body", "<head", "<title>")),
        (4, _has("<script ", "<link rel=", "<meta ")),
        (1, _has("href=", "src=", "class=", "id=")),
        (4, _has("<input ", "<form ", "<button ")),
        (3, _has_all("<ul>", "<li>")),
        (3, _has("<table>", "<tr>")),
        (2, _has("<td>", "<th>")),
        (2, _has("<img>", "<a>")),
        (1, _has("<p>", "<h1>")),
        (3, _has("<thead>", "<tbody>")),
        (3, _has("<footer>", "<header>")),
        (3, _has("<nav>", "<section>")),
        (1, _has("alt=", "title=")),
    )),
    ("CSS", (
        (7, _css_rule_block),
        (5, _lower("background-color:", "display: flex;", "font-family:")),
        (1, _lower("margin:", "padding:", "border:")),
        (5, _lower("@media ", "@keyframes ", "@import ")),
        (4, _lower("!important")),
        (4, _lower("justify-content:", "align-items:")),
        (2, _lower("color:", "font-size:")),
        (2, _lower("text-align:", "text-decoration:")),
        (4, _lower("position: absolute;", "position: relative;")),
        (3, _lower("z-index:", "opacity:")),
        (4, _lower("transition:", "transform:")),
        (3, _lower("box-sizing:", "cursor:")),
        (5, _lower("flex-direction:", "grid-template-")),
        (1, _lower("width:", "height:")),
        (3, _lower("border-radius:", "box-shadow:")),
    )),
    ("SQL", (
        (5, _has_all("SELECT ", "FROM ", view="upper")),
        (5, _upper("INSERT INTO ", "UPDATE ", "DELETE FROM ")),
        (5, _upper("CREATE TABLE ", "DROP TABLE ", "ALTER TABLE ")),
        (3, _both(_upper("WHERE "), _upper(" = ", " IN "))),
        (5, _has_all("JOIN ", " ON ", view="upper")),
        (4, _upper("GROUP BY ", "ORDER BY ")),
        (5, _upper("PRIMARY KEY", "FOREIGN KEY")),
        (3, _upper("DISTINCT ", "COUNT(")),
        (4, _upper("HAVING ", "UNION ALL")),
        (3, _has_all("BETWEEN ", " AND ", view="upper")),
        (3, _upper("LIKE '%", "IS NULL")),
        (2, _upper("DESC", "ASC")),
        (3, _upper("LIMIT ", "OFFSET ")),
        (4, _has_all("INTO ", "VALUES", view="upper")),
        (5, _upper("TRUNCATE TABLE", "RENAME TO")),
    )),
    ("PHP", (
        (8, _has("<?php")),
        (5, _has("$this->", "$_GET[", "$_POST[")),
        (3, _has_all('echo "', ";")),
        (4, _has_all("public function ", "{")),
        (6, _has("mysqli_connect", "PDO::")),
        (4, _has_all("foreach($", "as $")),
        (4, _has("var_dump(", "print_r(")),
        (4, _has("require_once", "include_once")),
        (3, _has("die(", "exit(")),
        (3, _has("namespace ", "use ")),
        (4, _has("parent::", "self::")),
        (4, _has("public static function", "private function")),
        (1, _has("array(", "[]")),
        (3, _has("isset(", "empty(")),
        (3, _has("json_encode(", "json_decode(")),
    )),
    ("Ruby", (
        (6, _both(_has_all("def ", "end"), _has("puts ", "require "))),
        (5, _has("attr_accessor ", "attr_reader", "attr_writer")),
        (4, _has_all("class ", " < ")),
        (5, _has(".each do |", ".map { |")),
        (6, _has("ActiveRecord::Base", "ActionController::Base")),
        (4, _has_all("rescue ", "ensure")),
        (3, _has("require '", "module ")),
        (3, _has("include ", "extend ")),
        (4, _has_all("yield", "def ")),
        (4, _has("alias_method", "private")),
        (3, _has("initialize", "self.")),
        (3, _has("nil?", "empty?")),
        (2, _has("|f|", "|line|")),
        (3, _has_all("#{", "}")),
        (5, _has("gem '", "bundle exec")),
    )),
    ("Markdown", (
        (4, _starts("# ", "## ", "### ")),
        (7, _has("```")),
        (4, _has_all("[", "](", ")")),
        (2, _has("**")),
        (5, _has("- [ ]", "- [x]")),
        (4, _has_all("|", "---")),
        (2, _has("* ", "> ")),
        (2, _has("1. ", "2. ")),
        (2, _has("---", "***")),
        (3, _has("~~")),
        (3, _has("![](", "<u>")),
        (5, _has("| :--- |", "| :---: |")),
        (2, _has("<u>", "<br>")),
        (2, _has_all("    ", "\n    ")),
        (4, _has("[^1]:")),
    )),
    ("Go", (
        (6, _has("package main")),
        (5, _has('import "fmt"', "fmt.Println(")),
        (4, _has_all("func ", "(", ")", "{")),
        (4, _has(":= ")),
        (5, _has("go func(")),
        (4, _has("chan ", "defer ", "select {")),
        (3, _has("interface {", "struct {")),
        (3, _has("import (", "type ")),
        (3, _has("map[", "make(")),
        (3, _has("append(", "panic(")),
        (2, _has("recover()", "len(")),
        (5, _has("context.Context", "http.Handler")),
        (5, _has("err != nil", "if err := ")),
        (6, _has("go.mod", "go.sum")),
        (4, _has_all("func (", ") ")),
    )),
    ("Rust", (
        (5, _has("fn main()", "pub fn ")),
        (4, _has("let mut ", "let ")),
        (5, _has("println!(")),
        (5, _has_all("match ", "=>")),
        (5, _has_all("impl ", "for ")),
        (3, _has("unwrap()", "expect(")),
        (4, _has("Box::new(", "Vec::new()")),
        (3, _has("use ", "mod ")),
        (2, _has("mut ", "static ")),
        (3, _has("const ", "extern ")),
        (3, _has("trait ", "struct ")),
        (5, _has("Cargo.toml", "Option<")),
        (4, _has("Result<", "Ok(")),
        (3, _has("Err(", "Vec<")),
        (6, _has("macro_rules!")),
    )),
    ("Swift", (
        (6, _has("import UIKit", "import Foundation")),
        (5, _has_all("func ", "->")),
        (5, _has("guard let ", "if let ")),
        (6, _has("@IBOutlet", "@IBAction", "@objc")),
        (4, _has("override func ", "extension ")),
        (4, _has_all('print("\\(', '")')),
        (1, _has("let ", "var ")),
        (2, _has("class ", "struct ")),
        (3, _has("enum ", "protocol ")),
        (3, _has("extension ", "static ")),
        (1, _has("public ", "private ")),
        (4, _has("fileprivate", "internal")),
        (4, _has_all("case ", "let ")),
        (4, _has_all("throws", "try ")),
        (3, _has_all("async", "await")),
    )),
    ("Kotlin", (
        (4, _has_all("package ", "val ")),
        (4, _has_all("fun ", "{")),
        (5, _has("data class ", "sealed class ")),
        (5, _has("companion object", "lateinit var")),
        (5, _has("suspend fun", "coroutineScope")),
        (4, _has("?.let {", "!!.")),
        (1, _has("val ", "var ")),
        (2, _has("class ", "object ")),
        (2, _has("interface ", "override ")),
        (3, _has("abstract ", "open ")),
        (2, _has("internal ", "private ")),
        (4, _has("listOf(", "mapOf(")),
        (5, _has_all("when (", "->")),
        (4, _has("fun main(", "println(")),
        (5, _has("@JvmStatic", "@Inject")),
    )),
    ("Shell", (
        (8, _starts("#!/bin/")),
        (5, _both(_has("echo "), _has("export ", "sudo "))),
        (6, _has_all("if [", "]; then")),
        (6, _has("apt-get install", "yum install", "brew install")),
        (5, _has(">> /dev/null", "2>&1")),
        (3, _has("grep ", "awk ", "sed ")),
        (8, _has("#!/bin/bash", "#!/bin/sh")),
        (5, _has("set -e", "set -x")),
        (3, _has("alias ", "source ")),
        (2, _has("exec ", "exit ")),
        (2, _has("wait ", "sleep ")),
        (5, _has("chmod +x", "chown ")),
        (4, _has("while read ", "for i in ")),
        (5, _has("$(command -v", "`which ")),
        (5, _has('dirname "$0"', "basename ")),
    )),
    ("YAML", (
        (6, _has_all("version: ", "services:")),
        (5, _has_all("image: ", "ports:")),
        (4, _has_all(": ", "\n  ")),
        (3, _has("    - ", "  - ")),
        (4, _has("environment:", "volumes:")),
        (3, _has("---", "...")),
        (3, _has("!!", "&", "*")),
        (3, _has("? ", "> ", "| ")),
        (1, _has("true", "false", "null")),
        (6, _has("api_version:", "kind:")),
        (5, _has("metadata:", "spec:")),
        (3, _has("tags:", "labels:")),
        (3, _has("enabled:", "disabled:")),
        (2, _has_all("  #", "\n  ")),
        (4, _has("defaults:", "profiles:")),
    )),
)


def code_density(text: str) -> float:
    """Fraction of word tokens that are reserved words in some language.

    Text that opens with a delimiter (``#include``, ``{``) yields a leading
    empty token that still counts in the denominator; trailing empties do not.
    """
    tokens = _TOKEN_SPLIT.split(text)
    while tokens and not tokens[-1]:
        tokens.pop()
    if not tokens:
        return 0.0
    hits = sum(1 for token in tokens if token in CODE_TOKENS)
    return hits / len(tokens)


def natural_language_penalty(text: str) -> int:
    penalty = 0
    run = 0
    longest_run = 0

    for word in text.split():
        clean = _NON_LETTERS.sub("", word)
        if not clean:
            continue
        if clean in CODE_TOKENS:
            longest_run = max(longest_run, run)
            run = 0
            continue
        run += 1
        if clean.lower() in COMMON_TEXT_WORDS:
            penalty += 1
    longest_run = max(longest_run, run)

    if longest_run > 5:
        penalty += (longest_run - 5) * 2

    penalty += 3 * sum(1 for _ in _SENTENCE.finditer(text))
    return penalty


def structural_score(text: str) -> int:
    score = 0
    if "{" in text and "}" in text:
        score += 2
    if text.count(";") > 1:
        score += 2
    if "(" in text and ")" in text:
        score += 1
    if "    " in text or "\t" in text:
        score += 1
    if "//" in text or "/*" in text or ("#" in text and " #" not in text):
        score += 1
    if " => " in text or " -> " in text:
        score += 2
    if " == " in text or " != " in text:
        score += 1
    if " && " in text or " || " in text:
        score += 1
    return score


def score_languages(text: str) -> Dict[str, int]:
    """Idiom score for every known language, in evaluation order."""
    sample = Sample.of(text)
    return {
        language: sum(weight for weight, predicate in rules if predicate(sample))
        for language, rules in LANGUAGE_RULES
    }


def detect_language(text: Optional[str]) -> Optional[str]:
    """Best-guess language of ``text``, or ``None`` when it does not look like code."""
    if text is None or len(text) < MIN_LENGTH:
        return None

    t = text.strip()
    density = code_density(t)
    penalty = natural_language_penalty(t)
    structure = structural_score(t)

    if density < 0.1 and structure < 2 and penalty > 5:
        return None

    best_language = None
    best_score = 0
    for language, score in score_languages(t).items():
        if score > best_score:
            best_language, best_score = language, score

    if best_score + structure - penalty < MIN_CODE_SCORE:
        return None
    if best_score < 4 and structure < 3:
        return None
    return best_language
