"""PEG grammar for PlantUML sequence diagrams.

Written for parsimonious. Whitespace is explicit:
  - WS / OWS (required / optional spaces and tabs) separate tokens on a line
  - EOL is a newline or the end of input, so the last line needs no newline
  - every statement occupies one line, except note and block-comment blocks

Only participant declarations, messages, activations and deactivations carry
meaning for the parser. Notes, fragments, dividers and other directives are
recognized so that valid diagrams parse, and are otherwise ignored.

The arrow rule lexes any run of arrow characters; mapping the token to one of
the known arrow shapes happens in parsers/plantuml.py so that an unknown shape
is reported by name instead of as a generic syntax error.
"""

GRAMMAR = r"""
plantuml        = blank_line* start_tag? diagram_content end_tag? trailing EOF

start_tag       = OWS ~r"@startuml\b[^\n\r]*" EOL
end_tag         = OWS "@enduml" OWS EOL
trailing        = ~r"[ \t\r\n]*"

diagram_content = (blank_line / line)*
blank_line      = OWS NEWLINE
line            = OWS statement OWS EOL

statement       = participant_declaration / activation / deactivation / message
                / note_line / note_block / fragment / directive
                / divider / delay / spacer / block_comment / comment

participant_declaration = participant_type WS identifier alias? participant_extra*
participant_type        = ~r"(participant|actor|boundary|control|entity|database|collections|queue)\b"
alias                   = WS "as" WS identifier
participant_extra       = WS (stereotype / color / order_clause)
stereotype              = ~r"<<[^>\n\r]*>>"
color                   = ~r"#[A-Za-z0-9]+"
order_clause            = ~r"order\s+-?[0-9]+"

message         = identifier OWS arrow OWS identifier OWS message_label?
arrow           = ~r"[-<>\\/~=]+"
message_label   = ":" message_text
message_text    = ~r"[^\n\r]*"

activation      = ~r"activate\b" WS identifier participant_extra*
deactivation    = ~r"deactivate\b" WS identifier

note_line       = ~r"[hr]?note\b[^:\n\r]*:[^\n\r]*"
note_block      = ~r"[hr]?note\b[^\n\r]*" NEWLINE note_body OWS end_note
note_body       = (!(OWS end_note) ~r"[^\n\r]*" NEWLINE)*
end_note        = ~r"end ?[hr]?note\b"

fragment        = ~r"(alt|else|opt|loop|par|break|critical|group|ref|end)\b[^\n\r]*"
directive       = ~r"(title|autonumber|autoactivate|skinparam|hide|show|header|footer|scale|newpage|return|destroy|create|box|legend|endlegend)\b[^\n\r]*"
divider         = ~r"==[^\n\r]*=="
delay           = ~r"\.\.\.[^\n\r]*"
spacer          = ~r"\|\|[0-9]*\|\|?"
block_comment   = ~r"/'.*?'/"s
comment         = ~r"'[^\n\r]*"

identifier        = quoted_string / simple_identifier
quoted_string     = ~r'"(?:[^"\\]|\\.)*"'
simple_identifier = ~r"[A-Za-z0-9_.]+"

NEWLINE   = ~r"\r\n|\n|\r"
EOL       = NEWLINE / EOF
EOF       = ~r"\Z"
WS        = ~r"[ \t]+"
OWS       = ~r"[ \t]*"
"""
