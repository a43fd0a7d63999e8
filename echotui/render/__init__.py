"""Styled lines, wrapping, layout, transcripts, event renderers and a scrolling viewport."""