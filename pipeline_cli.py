#!/usr/bin/env python3

"""
Command-line interface for the gene renaming pipeline.

Renames generator feature identifiers in a GFF3 file and optionally
relabels companion FASTA files with the same identifier map.
"""

import argparse
import sys
import logging

from gene_renaming_pipeline.core.config import load_config
from gene_renaming_pipeline.core.exceptions import PipelineError
from gene_renaming_pipeline.core.rules import split_rule_list

def setup_logging(log_level: str = "INFO") -> None:
    """Set up logging configuration."""
    logging.basicConfig(
        level=getattr(logging, log_level.upper()),
        format='%(asctime)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

def create_argument_parser() -> argparse.ArgumentParser:
    """Create command line argument parser."""
    parser = argparse.ArgumentParser(
        description="Rename annotation-generator feature identifiers to a compact naming scheme",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=r"""
Examples:
  # Rename with inferred widths
  python pipeline_cli.py --gff maker.gff3 --output-dir renamed

  # Shorten the locus token, fix widths and relabel proteins/transcripts
  python pipeline_cli.py --gff maker.gff3 --rules 'Niben044(\w)tg/Nb\1' \
      --counter-format 2+4,2 --exclude-types match,match_part \
      --fasta maker.proteins.fasta maker.transcripts.fasta --output-dir renamed

  # Relabel sequences later from a saved identifier map
  python pipeline_cli.py --id-map renamed/maker.renamed.id_map.tsv --fasta maker.proteins.fasta --output-dir renamed
        """
    )

    # Inputs
    parser.add_argument(
        '--gff',
        help='Input annotation file (GFF3)'
    )
    parser.add_argument(
        '--id-map',
        help='Identifier map from an earlier run; relabel --fasta files only'
    )
    parser.add_argument(
        '--fasta',
        nargs='+',
        default=[],
        help='FASTA files whose identifiers should be relabeled'
    )
    parser.add_argument(
        '--output-dir',
        required=True,
        help='Output directory for renamed files'
    )

    # Renaming options
    parser.add_argument(
        '--exclude-types',
        help='Comma separated feature types to drop (e.g. match,match_part)'
    )
    parser.add_argument(
        '--rules',
        help=r"Comma separated pattern/replacement rules applied to raw IDs (escape ',' as '\,')"
    )
    parser.add_argument(
        '--counter-format',
        help='Up to five widths: gene[,transcript[,exon[,cds[,utr]]]]; gene may be N or a+b'
    )
    parser.add_argument(
        '--exclude-empty-seqids',
        action='store_true',
        default=None,
        help='Omit sequences that carry no features'
    )
    parser.add_argument(
        '--no-fasta-section',
        action='store_true',
        help='Do not copy a trailing ##FASTA section to the output'
    )

    parser.add_argument(
        '--config',
        help='Configuration file (JSON or YAML)'
    )
    parser.add_argument(
        '--log-level',
        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
        default='INFO',
        help='Logging level (default: INFO)'
    )
    parser.add_argument(
        '--memory-limit',
        type=int,
        help='Memory limit in MB (default: 4096)'
    )

    return parser

def validate_arguments(parser: argparse.ArgumentParser, args) -> None:
    """Exactly one of --gff and --id-map; --id-map needs --fasta."""
    if bool(args.gff) == bool(args.id_map):
        parser.error("one of --gff or --id-map is required")
    if args.id_map and not args.fasta:
        parser.error("--id-map requires --fasta")

def main():
    """Main CLI entry point."""
    parser = create_argument_parser()
    args = parser.parse_args()
    validate_arguments(parser, args)

    setup_logging(args.log_level)
    logger = logging.getLogger(__name__)

    try:
        config = load_config(config_path=args.config, use_env=True)

        # Override config with command line arguments
        if args.exclude_types is not None:
            config.exclude_types = [t.strip() for t in args.exclude_types.split(',') if t.strip()]
        if args.rules is not None:
            config.rename_rules = split_rule_list(args.rules)
        if args.counter_format is not None:
            config.counter_format = args.counter_format.split(',')
        if args.exclude_empty_seqids is not None:
            config.exclude_empty_seqids = args.exclude_empty_seqids
        if args.no_fasta_section:
            config.include_fasta = False
        if args.memory_limit is not None:
            config.memory_limit_mb = args.memory_limit

        # Re-validate after CLI overrides.
        config.validate()

        from gene_renaming_pipeline import GeneRenamingPipeline

        pipeline = GeneRenamingPipeline(config)
        if args.id_map:
            logger.info(f"Relabeling {len(args.fasta)} sequence file(s) from {args.id_map}")
            success = pipeline.relabel_only(args.id_map, args.fasta, args.output_dir)
        else:
            logger.info(f"Renaming features in {args.gff}")
            success = pipeline.run(
                gff_file=args.gff,
                output_dir=args.output_dir,
                fasta_files=args.fasta
            )

        if success:
            logger.info("Pipeline completed successfully!")
            return 0
        else:
            logger.error("Pipeline failed!")
            return 1

    except PipelineError as e:
        logger.error(f"Pipeline error: {e}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        logger.debug("Full traceback:", exc_info=True)
        return 1

if __name__ == "__main__":
    sys.exit(main())
