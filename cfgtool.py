#!/usr/bin/env python3

import argparse
import logging
import random
import sys

from nltk.grammar import CFG, Nonterminal, Production as NltkProduction

logger = logging.getLogger(__name__)

# Reserved characters of the rule text format
OR = ","
NT_OPEN = "<"
NT_CLOSE = ">"

DEFAULT_GEN_CONFIG = {
    "start_symbol": "start", "max_recursion_depth": None,
    "separator": " ", "strip_output": False,
}

START, NOUN_PHRASE, VERB_PHRASE, PREP_PHRASE = "start", "noun-phrase", "verb-phrase", "prep-phrase"
CMPLX_NOUN, CMPLX_VERB = "cmplx-noun", "cmplx-verb"
NOUN, VERB, PREP, ARTICLE = "noun", "verb", "prep", "article"

DEFAULT_NOUNS = "girl, dog, boy"
DEFAULT_VERBS = "eats, attacks, launches"
DEFAULT_PREPS = "around, over, under"
DEFAULT_ARTICLES = "the, a"

STRUCTURAL_NONTERMINALS = (START, NOUN_PHRASE, VERB_PHRASE, PREP_PHRASE, CMPLX_NOUN, CMPLX_VERB)
LEXICAL_NONTERMINALS = (NOUN, VERB, PREP, ARTICLE)
DEFAULT_NONTERMINALS = STRUCTURAL_NONTERMINALS + LEXICAL_NONTERMINALS


def _ref(name): return f"{NT_OPEN}{name}{NT_CLOSE}"


# Index-aligned with DEFAULT_NONTERMINALS
DEFAULT_RULES = (
    _ref(NOUN_PHRASE) + _ref(VERB_PHRASE),
    _ref(CMPLX_NOUN) + OR + _ref(CMPLX_NOUN) + _ref(PREP_PHRASE),
    _ref(CMPLX_VERB) + OR + _ref(CMPLX_VERB) + _ref(PREP_PHRASE),
    _ref(PREP) + _ref(CMPLX_NOUN),
    _ref(ARTICLE) + _ref(NOUN),
    _ref(VERB) + OR + _ref(VERB) + _ref(NOUN_PHRASE),
    DEFAULT_NOUNS, DEFAULT_VERBS, DEFAULT_PREPS, DEFAULT_ARTICLES,
)


class GrammarError(Exception): pass

class EmptyProductionSet(GrammarError):
    def __init__(self, nonterminal):
        self.nonterminal = nonterminal
        super().__init__(f"Nonterminal '{_ref(nonterminal)}' has no productions to choose from.")

class GenerationDepthExceeded(GrammarError):
    def __init__(self, nonterminal, max_depth):
        self.nonterminal, self.max_depth = nonterminal, max_depth
        limit = "the interpreter recursion limit" if max_depth is None else f"recursion depth {max_depth}"
        super().__init__(f"Expansion of '{_ref(nonterminal)}' exceeded {limit}; the grammar may not terminate.")


def bare_name(name):
    """Return a nonterminal name without its angle brackets ('<noun>' -> 'noun')."""
    if isinstance(name, Nonterminal): return name.symbol()
    name = name.strip()
    if len(name) >= 2 and name.startswith(NT_OPEN) and name.endswith(NT_CLOSE): return name[1:-1]
    return name


# --- Rule text parsing ---
def parse_alternative(text):
    """Scan one alternative into a Production (tuple of symbols).

    Bracketed references become Nonterminal symbols, every other run of
    characters becomes one terminal string. An unclosed '<' is kept as
    terminal text up to the end of the alternative.
    """
    text = text.strip()
    symbols, buf, in_ref = [], [], False
    for ch in text:
        if in_ref:
            buf.append(ch)
            if ch == NT_CLOSE:
                symbols.append(Nonterminal("".join(buf[1:-1]))); buf, in_ref = [], False
        elif ch == NT_OPEN:
            if buf: symbols.append("".join(buf))
            buf, in_ref = [ch], True
        else:
            buf.append(ch)
    if buf:
        if in_ref: logger.warning("Unmatched '%s' in rule alternative %r; kept as terminal text.", NT_OPEN, text)
        symbols.append("".join(buf))
    return tuple(symbols)

def parse_rule_text(text):
    """Parse comma separated alternatives into an ordered list of Productions."""
    productions = []
    for piece in (text or "").split(OR):
        piece = piece.strip()
        if not piece: continue
        productions.append(parse_alternative(piece))
    return productions

def format_production(production, joiner="+"):
    return "".join(f"{_ref(s.symbol()) if isinstance(s, Nonterminal) else s}{joiner}" for s in production)


class Grammar:
    def __init__(self, rules=None, start_symbol=None, generation_config=None):
        self.gen_config = DEFAULT_GEN_CONFIG.copy()
        if generation_config: self.gen_config.update(generation_config)
        self.start = Nonterminal(bare_name(start_symbol or self.gen_config["start_symbol"]))
        self._rules = {}
        if rules: self.update_rules(rules)

    def update_rules(self, rules):
        """Replace the rule of every nonterminal named in `rules`; others are left untouched."""
        for name, text in rules.items():
            key = bare_name(name)
            self._rules[key] = parse_rule_text(text)
            logger.debug("Rule %s now has %d production(s).", _ref(key), len(self._rules[key]))
        return self

    def copy(self):
        new = Grammar(start_symbol=self.start.symbol(), generation_config=self.gen_config)
        new._rules = {name: list(prods) for name, prods in self._rules.items()}
        return new

    def rules(self, name): return list(self._rules[bare_name(name)])
    def nonterminals(self): return list(self._rules)
    def __contains__(self, name): return bare_name(name) in self._rules
    def __len__(self): return len(self._rules)

    def __str__(self):
        lines = []
        for name, prods in self._rules.items():
            lines.append(f"{_ref(name)}:" + "".join(f"{format_production(p)}," for p in prods))
        return "\n".join(lines)

    def __repr__(self):
        return f"Grammar(start={_ref(self.start.symbol())!r}, nonterminals={self.nonterminals()!r})"

    def to_nltk(self):
        """Export as an nltk CFG. Nonterminals without productions are omitted."""
        productions = [NltkProduction(Nonterminal(name), prod)
                       for name, prods in self._rules.items() for prod in prods]
        return CFG(self.start, productions)

    # --- Generation ---
    def _expand(self, symbol, rng, out, depth, trail):
        if not isinstance(symbol, Nonterminal):
            out.append(symbol); return
        name = symbol.symbol()
        if name not in self._rules:
            # Undefined references are literal leaves
            out.append(_ref(name)); return
        max_depth = self.gen_config["max_recursion_depth"]
        if max_depth is not None and depth > max_depth: raise GenerationDepthExceeded(name, max_depth)
        options = self._rules[name]
        if not options: raise EmptyProductionSet(name)
        choice = options[rng.randrange(len(options))]
        trail.append(name)
        for sym in choice:
            self._expand(sym, rng, out, depth + 1, trail)
        trail.pop()

    def generate_words(self, start_symbol=None, rng=None):
        start = Nonterminal(bare_name(start_symbol)) if start_symbol else self.start
        rng = rng or random
        out, trail = [], []
        try: self._expand(start, rng, out, 0, trail)
        except RecursionError as e:
            # trail still holds the expansion path at the point of failure
            raise GenerationDepthExceeded(trail[-1] if trail else start.symbol(), None) from e
        return out

    def generate(self, start_symbol=None, rng=None):
        sep = self.gen_config["separator"]
        sentence = "".join(word + sep for word in self.generate_words(start_symbol, rng))
        return sentence.strip() if self.gen_config["strip_output"] else sentence

    def generate_sentences(self, num_sentences, start_symbol=None, rng=None):
        return [self.generate(start_symbol, rng) for _ in range(num_sentences)]


# --- Public API ---
def build_grammar(rules, start_symbol=None, generation_config=None):
    return Grammar(rules, start_symbol=start_symbol, generation_config=generation_config)

def update_rules(grammar, rules):
    """Return a copy of `grammar` with the named rules replaced."""
    return grammar.copy().update_rules(rules)

def default_rule_map(nouns=None, verbs=None, preps=None, articles=None):
    rules = dict(zip(DEFAULT_NONTERMINALS, DEFAULT_RULES))
    for name, words in zip(LEXICAL_NONTERMINALS, (nouns, verbs, preps, articles)):
        if words is not None: rules[name] = words
    return rules

def build_default_grammar(nouns=None, verbs=None, preps=None, articles=None, generation_config=None):
    return Grammar(default_rule_map(nouns, verbs, preps, articles), start_symbol=START,
                   generation_config=generation_config)

def update_word_lists(grammar, nouns=None, verbs=None, preps=None, articles=None):
    """Return a copy of `grammar` with only the lexical categories overwritten (None keeps a category)."""
    words = {name: w for name, w in zip(LEXICAL_NONTERMINALS, (nouns, verbs, preps, articles)) if w is not None}
    return update_rules(grammar, words)

def generate(grammar, start_symbol=None, rng=None):
    return grammar.generate(start_symbol, rng)

def list_nonterminals(grammar=None):
    return list(DEFAULT_NONTERMINALS) if grammar is None else grammar.nonterminals()

def list_default_rules():
    return list(DEFAULT_RULES)

def render_grammar(grammar): return str(grammar)


def _parse_rule_arg(value):
    name, sep, text = value.partition("=")
    if not sep or not name.strip(): raise argparse.ArgumentTypeError(f"expected NAME=TEXT, got {value!r}")
    return bare_name(name), text

def main(argv=None):
    parser = argparse.ArgumentParser(description="Random sentence generator for comma/angle-bracket context-free grammars.")
    parser.add_argument("-g", "--generate", type=int, metavar="N", default=1, help="Generate N sentences (default 1).")
    parser.add_argument("-r", "--rule", action="append", type=_parse_rule_arg, default=[], metavar="NAME=TEXT",
                        help="Replace the rule for NAME, e.g. --rule 'noun=cat, hat'. Repeatable.")
    parser.add_argument("--nouns", help="Comma separated nouns.")
    parser.add_argument("--verbs", help="Comma separated verbs.")
    parser.add_argument("--preps", help="Comma separated prepositions.")
    parser.add_argument("--articles", help="Comma separated articles.")
    parser.add_argument("--start", default=START, help="Start nonterminal (default 'start').")
    parser.add_argument("--seed", type=int, help="Seed for reproducible output.")
    parser.add_argument("--max-depth", type=int, metavar="D", help="Fail instead of recursing deeper than D.")
    parser.add_argument("--strip", action="store_true", help="Trim the trailing separator from each sentence.")
    parser.add_argument("--show", action="store_true", help="Print the grammar before generating.")
    parser.add_argument("--list", action="store_true", help="List the default nonterminals and their rules, then exit.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING,
                        format="%(levelname)s %(name)s: %(message)s")

    if args.list:
        for name, rule in zip(list_nonterminals(), list_default_rules()): print(f"{_ref(name)}: {rule}")
        return
    if args.generate <= 0: print("Error: -g N must be positive.", file=sys.stderr); sys.exit(1)
    if args.max_depth is not None and args.max_depth < 0: print("Error: --max-depth must be >= 0.", file=sys.stderr); sys.exit(1)

    config = {"max_recursion_depth": args.max_depth, "strip_output": args.strip}
    grammar = build_default_grammar(generation_config=config)
    grammar = update_word_lists(grammar, args.nouns, args.verbs, args.preps, args.articles)
    if args.rule: grammar = update_rules(grammar, dict(args.rule))
    if args.show: print(render_grammar(grammar))

    rng = random.Random(args.seed)
    try:
        for sentence in grammar.generate_sentences(args.generate, args.start, rng): print(sentence)
    except GrammarError as e: print(f"Error during sentence generation: {e}", file=sys.stderr); sys.exit(1)

if __name__ == "__main__":
    main()
