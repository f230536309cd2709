"""Generator input, DMMF model, casing helpers and AST transformation."""