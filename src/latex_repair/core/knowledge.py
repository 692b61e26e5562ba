"""Read-only lookup tables used by the fix rules.

All tables are built once at import time and exposed as immutable views.
"""

from __future__ import annotations

from types import MappingProxyType

# Maps an undefined command to the package that defines it.
COMMAND_TO_PACKAGE: MappingProxyType[str, str] = MappingProxyType(
    {
        # Math
        "\\mathbb": "amssymb",
        "\\mathcal": "amsmath",
        "\\mathfrak": "amssymb",
        "\\mathscr": "mathrsfs",
        "\\boldsymbol": "amsmath",
        "\\text": "amsmath",
        "\\intertext": "amsmath",
        "\\binom": "amsmath",
        "\\DeclareMathOperator": "amsmath",
        "\\operatorname": "amsmath",
        "\\xleftarrow": "amsmath",
        "\\xrightarrow": "amsmath",
        "\\overset": "amsmath",
        "\\underset": "amsmath",
        "\\implies": "amsmath",
        "\\iff": "amsmath",
        # Graphics
        "\\includegraphics": "graphicx",
        "\\graphicspath": "graphicx",
        "\\rotatebox": "graphicx",
        "\\scalebox": "graphicx",
        "\\resizebox": "graphicx",
        # Color
        "\\textcolor": "xcolor",
        "\\colorbox": "xcolor",
        "\\definecolor": "xcolor",
        "\\rowcolors": "xcolor",
        # Typography and tables
        "\\url": "url",
        "\\href": "hyperref",
        "\\autoref": "hyperref",
        "\\nameref": "hyperref",
        "\\toprule": "booktabs",
        "\\midrule": "booktabs",
        "\\bottomrule": "booktabs",
        "\\cmidrule": "booktabs",
        "\\multirow": "multirow",
        "\\SI": "siunitx",
        "\\si": "siunitx",
        "\\num": "siunitx",
        "\\lstinline": "listings",
        "\\lstset": "listings",
        "\\mintinline": "minted",
        "\\subcaption": "subcaption",
        "\\subfigure": "subcaption",
        "\\lipsum": "lipsum",
        # TikZ and plots
        "\\tikz": "tikz",
        "\\draw": "tikz",
        "\\node": "tikz",
        "\\fill": "tikz",
        "\\path": "tikz",
        "\\pgfplotstableread": "pgfplots",
        # Layout
        "\\geometry": "geometry",
        "\\fancyhf": "fancyhdr",
        "\\fancyhead": "fancyhdr",
        "\\fancyfoot": "fancyhdr",
        "\\pagestyle": "fancyhdr",
        "\\setlist": "enumitem",
        "\\titleformat": "titlesec",
    }
)

# Frequent misspellings with a known correction.
COMMON_TYPOS: MappingProxyType[str, str] = MappingProxyType(
    {
        "\\begn": "\\begin",
        "\\ens": "\\end",
        "\\sectino": "\\section",
        "\\subsectino": "\\subsection",
        "\\itm": "\\item",
        "\\texitit": "\\textit",
        "\\texti": "\\textit",
        "\\textbb": "\\textbf",
        "\\emhp": "\\emph",
        "\\newpagee": "\\newpage",
        "\\usepackge": "\\usepackage",
        "\\documentclas": "\\documentclass",
        "\\incldue": "\\include",
        "\\inlcude": "\\include",
        "\\includegraphic": "\\includegraphics",
        "\\lable": "\\label",
        "\\capton": "\\caption",
        "\\rerf": "\\ref",
        "\\ceite": "\\cite",
        "\\bibilography": "\\bibliography",
    }
)

# Candidates for distance-1 typo correction, tried in order.
COMMON_COMMANDS: tuple[str, ...] = (
    "\\begin",
    "\\end",
    "\\section",
    "\\subsection",
    "\\subsubsection",
    "\\item",
    "\\textbf",
    "\\textit",
    "\\emph",
    "\\newpage",
    "\\usepackage",
    "\\documentclass",
    "\\include",
    "\\input",
    "\\includegraphics",
    "\\label",
    "\\caption",
    "\\ref",
    "\\cite",
    "\\bibliography",
    "\\footnote",
    "\\chapter",
    "\\paragraph",
    "\\author",
    "\\title",
    "\\date",
    "\\maketitle",
    "\\tableofcontents",
)

# Tokens that are only legal in math mode, tried in order.
MATH_TOKENS: tuple[str, ...] = (
    "_",
    "^",
    "\\alpha",
    "\\beta",
    "\\gamma",
    "\\delta",
    "\\sum",
    "\\int",
    "\\frac",
    "\\sqrt",
    "\\infty",
    "\\pi",
    "\\theta",
    "\\lambda",
    "\\mu",
    "\\sigma",
    "\\omega",
)
