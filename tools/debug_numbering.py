import sys, os
sys.path.append(os.getcwd())
from docx_structural import read_docx
from list_assembler import assemble_list_fragments
from conversion.numbering_builder import NumberingBuilder
from models import NumberingParagraph

doc = read_docx(sys.argv[1] if len(sys.argv) > 1 else 'samples/Urteil.docx')
builder = NumberingBuilder()
entries = [builder.to_entry(e) for e in doc.elements if isinstance(e, NumberingParagraph)]
for i, e in enumerate(entries):
    print(f"{i:03d}: level={e.level} format={e.format.name:<12} {e.content_html[:70]!r}")
print('--- assembled ---')
depth = 0
for tag in assemble_list_fragments(entries):
    if tag.startswith('</o') or tag.startswith('</u'):
        depth -= 1
    print('  ' * depth + tag[:90])
    if tag.startswith('<ol') or tag.startswith('<ul'):
        depth += 1
print('--- footer ---')
print(doc.footer_text)
print('--- custom properties ---')
for k, v in doc.custom_properties.items():
    print(f"{k} = {v}")
