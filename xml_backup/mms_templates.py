"""
Fixed XML fragments of the <mms> element.

The backup app's importer expects these attributes even though their values carry
no meaning for an exported message. They must be written exactly as they appear
here, including the single-quoted SMIL "text" attribute.
"""

MMS_OPEN = "<mms "

# Between "<mms " and the date attribute
MMS_ATTRIBUTES_BEFORE_DATE = 'text_only="0" sub="null" retr_st="null" '

# Between the date and read attributes
MMS_ATTRIBUTES_BEFORE_READ = 'ct_cls="null" sub_cs="null" '

# The importer expects every exported MMS to be marked read
MMS_READ = "1"

# Between the read and address attributes
MMS_ATTRIBUTES_BEFORE_ADDRESS = 'ct_l="null" tr_id="null" st="null" msg_box="1" '

# After the address attribute, up to the end of the start tag
MMS_ATTRIBUTES_AFTER_ADDRESS = (
    'm_cls="personal" d_tm="null" read_status="null" '
    'ct_t="application/vnd.wap.multipart.related" retr_txt_cs="null" d_rpt="129" '
    'm_id="null" date_sent="0" seen="0" m_type="132" v="18" exp="null" pri="129" '
    'rr="129" resp_txt="null" rpt_a="null" locked="0" retr_txt="null" '
    'resp_st="null" m_size="null" readable_date="null" contact_name="null"'
)

MMS_OPEN_END = ">\n"

MMS_CLOSE = "</mms>"

# Text part; the escaped display body follows as the "text" attribute
TEXT_PART_OPEN = (
    '<part seq="0" ct="text/plain" name="Text_0.txt" chset="106" cd="null" '
    'fn="null" cid="&lt;313&gt;" cl="Text_0.txt" ctt_s="null" ctt_t="null" '
)

# Two-region slideshow layout: image on top, text below
SMIL_PART = (
    '<part seq="-1" ct="application/smil" name="Smil.txt" chset="106" cd="null" '
    'fn="null" cid="&lt;0000&gt;" cl="Smil.txt" ctt_s="null" ctt_t="null" '
    "text='&lt;smil&gt;&#13;&#10;"
    "  &lt;head&gt;&#13;&#10;"
    "    &lt;layout&gt;&#13;&#10;"
    '      &lt;region fit="scroll" height="50%" id="Text" left="0" top="50%" width="100%"/&gt;&#13;&#10;'
    '      &lt;region fit="meet" height="50%" id="Image" left="0" top="0" width="100%"/&gt;&#13;&#10;'
    "    &lt;/layout&gt;&#13;&#10;"
    "  &lt;/head&gt;&#13;&#10;"
    "  &lt;body&gt;&#13;&#10;"
    '    &lt;par dur="5000ms"&gt;&#13;&#10;'
    '      &lt;img region="Image" src="cid:312"/&gt;&#13;&#10;'
    '      &lt;text region="Text" src="cid:313"/&gt;&#13;&#10;'
    "    &lt;/par&gt;&#13;&#10;"
    "  &lt;/body&gt;&#13;&#10;"
    "&lt;/smil&gt;&#13;&#10;' />\n"
)

# Attachment part; the "ct" attribute goes between these two fragments and the
# base64 "data" attribute follows the second
ATTACHMENT_PART_OPEN = '<part seq="0" '
ATTACHMENT_PART_ATTRIBUTES = (
    'name="test.jpeg" chset="null" cd="null" fn="null" cid="&lt;312&gt;" '
    'cl="test.jpeg" ctt_s="null" ctt_t="null" text="null" '
)

PART_CLOSE = "/>\n"
